"""Копирование файлов ресурсов рядом с сохраняемой сценой."""

import shutil
from pathlib import Path


def copy_file(src, dst) -> bool:
    """
    Копирует src в dst, создавая каталоги. Существующий dst перезаписывается
    только если src новее. Возвращает True, если файл был скопирован.
    FileNotFoundError, если src отсутствует.
    """
    src = Path(src)
    dst = Path(dst)
    if not src.exists():
        raise FileNotFoundError(f"Source file does not exist: {src}")
    dst.parent.mkdir(parents=True, exist_ok=True)
    if dst.exists() and src.stat().st_mtime <= dst.stat().st_mtime:
        return False
    shutil.copy2(src, dst)
    return True

# pbrtscene/parse/read_file.py
# ---------------------------------------------------------------
# Чтение файлов сцены (.pbrt, .pbrt.gz) и раскрытие Include.
# Каждый включённый файл оборачивается в WorkDirBegin/WorkDirEnd,
# чтобы относительные пути разрешались от его каталога.
# ---------------------------------------------------------------
import gzip
import re
from pathlib import Path
from typing import List

from pbrtscene.errors import PbrtError
from pbrtscene.parse.comments import remove_comments
from pbrtscene.utils.logger import logger

_INCLUDE_RE = re.compile(r'(?P<include>\bInclude\s+"(?P<file>[^"\n]*)")|(?P<string>"[^"\n]*")')


def read_text(path) -> str:
    """Текст файла; *.gz распаковывается прозрачно."""
    p = Path(path)
    if p.suffix == ".gz":
        with gzip.open(p, "rt", encoding="utf-8") as f:
            return f.read()
    return p.read_text(encoding="utf-8")


def work_dir_begin_text(directory) -> str:
    return f'WorkDirBegin "{Path(directory).as_posix()}"\n'


def work_dir_end_text() -> str:
    return "WorkDirEnd\n"


def _find_include(filename: str, dirs: List[Path]) -> Path:
    candidate = Path(filename)
    if candidate.is_absolute():
        if candidate.exists():
            return candidate
    else:
        for d in reversed(dirs):
            p = d / candidate
            if p.exists():
                return p
    raise FileNotFoundError(f"Include file not found: {filename}")


def _expand(path: Path, dirs: List[Path], chain: List[Path]) -> str:
    text = remove_comments(read_text(path))
    out = []
    pos = 0
    for m in _INCLUDE_RE.finditer(text):
        if m.group("include") is None:
            continue
        out.append(text[pos:m.start()])
        pos = m.end()

        next_path = _find_include(m.group("file"), dirs).resolve()
        if next_path in chain:
            raise PbrtError(f"Recursive Include of {next_path}")
        logger.debug(f"[ReadFile] Include {next_path}")

        dirs.append(next_path.parent)
        chain.append(next_path)
        try:
            out.append("\n")
            out.append(work_dir_begin_text(next_path.parent))
            out.append(_expand(next_path, dirs, chain))
            out.append("\n")
            out.append(work_dir_end_text())
        finally:
            chain.pop()
            dirs.pop()
    out.append(text[pos:])
    return "".join(out)


def read_file_with_include(path) -> str:
    """Текст файла со всеми Include, раскрытыми на месте."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Scene file not found: {p}")
    p = p.resolve()
    dirs = [p.parent]
    body = _expand(p, dirs, [p])
    return work_dir_begin_text(p.parent) + body + "\n" + work_dir_end_text()


def read_file_without_include(path) -> str:
    """Текст файла без комментариев; Include остаются директивами."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Scene file not found: {p}")
    return remove_comments(read_text(p))

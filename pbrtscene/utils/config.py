"""
Простой загрузчик/сохранитель конфигурации в формате JSON.
Если файл не найден – создаётся файл с настройками по‑умолчанию.
"""

import copy
import json
from pathlib import Path
from pbrtscene.utils.logger import logger

DEFAULT_CONFIG = {
    "save": {"pretty_print": True, "copy_resources": True},
    "print": {"omit_long_values": False},
    "log_level": "info",
}


class Config:
    """Конфигурация, привязанная к одному JSON‑файлу."""

    def __init__(self, path: str = "pbrtscene.json", create: bool = True):
        self.path = Path(path)
        self._create = create
        self._load()

    def _load(self):
        if self.path.is_file():
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    self.data = json.load(f)
                logger.info(f"[Config] Loaded configuration from {self.path}.")
            except (OSError, ValueError) as exc:
                logger.error(f"[Config] Failed to read config: {exc}")
                self.data = copy.deepcopy(DEFAULT_CONFIG)
        else:
            self.data = copy.deepcopy(DEFAULT_CONFIG)
            if self._create:
                logger.info("[Config] No config file – creating default.")
                self.save()

    def save(self):
        try:
            with self.path.open("w", encoding="utf-8") as f:
                json.dump(self.data, f, indent=4)
            logger.info("[Config] Configuration saved.")
        except OSError as exc:
            logger.error(f"[Config] Unable to save config: {exc}")

    def __getitem__(self, key):
        return self.data.get(key, DEFAULT_CONFIG.get(key))

    def __setitem__(self, key, value):
        self.data[key] = value
        self.save()

    def get(self, key, default=None):
        return self.data.get(key, default)

    def section(self, key) -> dict:
        """Секция с подставленными значениями по‑умолчанию."""
        merged = dict(DEFAULT_CONFIG.get(key, {}))
        merged.update(self.data.get(key, {}))
        return merged

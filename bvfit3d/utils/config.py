"""
Простой загрузчик/сохранитель конфигурации в формате JSON.
Если файл не найден – используются настройки по‑умолчанию
(файл создаётся только явным вызовом save()).
"""

import json
import os
from pathlib import Path
from bvfit3d.utils.logger import logger, set_level

CONFIG_ENV = "BVFIT3D_CONFIG"
DEFAULT_PATH = "bvfit3d.json"

DEFAULT_CONFIG = {
    "eigen_solver": "numpy",       # numpy | jacobi
    "containment_eps": 1e-6,       # допуск для contains()
    "max_workers": None,           # размер TaskPool по‑умолчанию
    "log_level": "INFO",
}


class Config:
    """Singleton‑подобный объект конфигурации."""
    _instance = None

    def __new__(cls, path: str = None):
        if cls._instance is None:
            if path is None:
                path = os.environ.get(CONFIG_ENV, DEFAULT_PATH)
            cls._instance = super().__new__(cls)
            cls._instance.path = Path(path)
            cls._instance._load()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Сбросить singleton (следующий Config() перечитает файл)."""
        cls._instance = None

    def _load(self):
        self.data = dict(DEFAULT_CONFIG)
        loaded = {}
        if self.path.is_file():
            try:
                with self.path.open("r", encoding="utf-8") as f:
                    loaded = json.load(f)
                self.data.update(loaded)
                logger.info(f"[Config] Loaded configuration from {self.path}.")
            except (OSError, ValueError) as exc:
                logger.error(f"[Config] Failed to read config: {exc}")
                loaded = {}
                self.data = dict(DEFAULT_CONFIG)
        else:
            logger.debug("[Config] No config file – using defaults.")
        # уровень, выставленный через set_level(), меняет только сам файл
        if "log_level" in loaded:
            set_level(loaded["log_level"])

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

    def get(self, key, default=None):
        return self.data.get(key, default)

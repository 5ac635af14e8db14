"""
Замер времени блока кода: BVFitter.fit логирует время подгонки узла.
"""

import logging
import time

from bvfit3d.utils.logger import logger


class Profiler:
    """Контекст‑менеджер; после выхода elapsed_ms хранит время блока.

    Сообщение пишется на уровне `level` (по‑умолчанию DEBUG).
    """
    def __init__(self, name: str, level: int = logging.DEBUG):
        self.name = name
        self.level = level
        self.elapsed_ms = 0.0
        self._start = 0.0

    def __enter__(self):
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.elapsed_ms = (time.perf_counter() - self._start) * 1000.0
        if logger.isEnabledFor(self.level):
            logger.log(self.level, "[Profiler] %s: %.3f ms", self.name, self.elapsed_ms)

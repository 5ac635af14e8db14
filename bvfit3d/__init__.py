"""
bvfit3d – подгонка ограничивающих объёмов для BVH в задачах
обнаружения столкновений.

Семейства: OBB, RSS (rectangle‑swept sphere), kIOS (1/3/5 сфер),
OBBRSS. Точные формулы для 1, 2, 3 и 6 точек, общий путь через
ковариацию и собственные векторы для произвольного числа точек.
"""

from bvfit3d.utils import logger, Config
from bvfit3d.bv import BVKind, OBB, RSS, KIOS, Sphere, OBBRSS, merge
from bvfit3d.fitting import (
    fit,
    get_fitter,
    BVFitter,
    OBBFitter,
    RSSFitter,
    KIOSFitter,
    OBBRSSFitter,
)
from bvfit3d.multithread import TaskPool

__version__ = "1.0.0"

__all__ = [
    "logger",
    "Config",
    "BVKind",
    "OBB",
    "RSS",
    "KIOS",
    "Sphere",
    "OBBRSS",
    "fit",
    "merge",
    "get_fitter",
    "BVFitter",
    "OBBFitter",
    "RSSFitter",
    "KIOSFitter",
    "OBBRSSFitter",
    "TaskPool",
]

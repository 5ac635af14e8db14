"""
Пакет bv – ограничивающие объёмы (OBB, RSS, kIOS, OBBRSS) и их слияние.
"""

from enum import Enum

from bvfit3d.bv.obb import OBB, merge_obb
from bvfit3d.bv.rss import RSS, merge_rss
from bvfit3d.bv.kios import KIOS, Sphere, merge_kios, enclose_sphere
from bvfit3d.bv.obbrss import OBBRSS, merge_obbrss


class BVKind(Enum):
    """Семейство ограничивающего объёма."""
    OBB = "obb"
    RSS = "rss"
    KIOS = "kios"
    OBBRSS = "obbrss"

    @classmethod
    def parse(cls, value) -> "BVKind":
        """BVKind, строка ("obb", "kIOS", ...) или класс объёма."""
        if isinstance(value, cls):
            return value
        if isinstance(value, type) and value in _KIND_BY_TYPE:
            return _KIND_BY_TYPE[value]
        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass
        raise ValueError(
            f"Unknown bounding volume kind: {value!r}. "
            f"Available: {[k.value for k in cls]}"
        )


_KIND_BY_TYPE = {OBB: BVKind.OBB, RSS: BVKind.RSS, KIOS: BVKind.KIOS, OBBRSS: BVKind.OBBRSS}

_MERGERS = {
    OBB: merge_obb,
    RSS: merge_rss,
    KIOS: merge_kios,
    OBBRSS: merge_obbrss,
}


def merge(b1, b2, solver: str = None):
    """Объём того же семейства, покрывающий оба входных объёма."""
    if type(b1) is not type(b2):
        raise TypeError(
            f"Cannot merge {type(b1).__name__} with {type(b2).__name__}"
        )
    try:
        merger = _MERGERS[type(b1)]
    except KeyError:
        raise TypeError(f"Unsupported bounding volume type: {type(b1).__name__}") from None
    return merger(b1, b2, solver)


__all__ = [
    "BVKind",
    "OBB", "RSS", "KIOS", "Sphere", "OBBRSS",
    "merge", "merge_obb", "merge_rss", "merge_kios", "merge_obbrss",
    "enclose_sphere",
]

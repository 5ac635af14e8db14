"""
Пакет fitting – подгонщики по семействам и BVFitter для построителя BVH.
"""

from bvfit3d.fitting.fitter import (
    BaseFitter,
    OBBFitter,
    RSSFitter,
    KIOSFitter,
    OBBRSSFitter,
    get_fitter,
    fit,
    kios_sphere_count,
    KIOS_RATIO,
)
from bvfit3d.fitting.indexed import BVFitter

__all__ = [
    "BaseFitter",
    "OBBFitter",
    "RSSFitter",
    "KIOSFitter",
    "OBBRSSFitter",
    "get_fitter",
    "fit",
    "kios_sphere_count",
    "KIOS_RATIO",
    "BVFitter",
]

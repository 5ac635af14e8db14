"""
Математический суб‑пакет: Quat, базисы (frame), собственное разложение 3×3.
"""

from bvfit3d.math.quat import Quat
from bvfit3d.math.frame import (
    axis_from_eigen,
    generate_coordinate_system,
    triangle_frame,
    circumcircle,
    safe_normalize,
    is_orthonormal,
)
from bvfit3d.math.eigen import eigen, register_solver, available_solvers

__all__ = [
    "Quat",
    "axis_from_eigen",
    "generate_coordinate_system",
    "triangle_frame",
    "circumcircle",
    "safe_normalize",
    "is_orthonormal",
    "eigen",
    "register_solver",
    "available_solvers",
]

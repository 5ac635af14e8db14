# bvfit3d/bv/_common.py
from bvfit3d.utils.config import Config


def resolve_eps(eps):
    """Допуск contains(): явный или из Config()["containment_eps"]."""
    if eps is None:
        return float(Config()["containment_eps"])
    return float(eps)

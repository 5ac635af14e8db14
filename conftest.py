# -*- coding: utf-8 -*-
"""
conftest.py – общие фикстуры: изолированный Config, генератор случайных
чисел и типовые облака точек (шар, стержень, диск, пара треугольников).
"""

import numpy as np
import pytest

from bvfit3d.math.quat import Quat
from bvfit3d.utils.config import Config, CONFIG_ENV


# ----------------------------------------------------------------------
# Config не должен читать файл из рабочей директории
# ----------------------------------------------------------------------
@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv(CONFIG_ENV, str(tmp_path / "bvfit3d.json"))
    Config.reset()
    yield
    Config.reset()


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


# ----------------------------------------------------------------------
# Облака точек
# ----------------------------------------------------------------------
def make_ball(n: int = 200, radius: float = 1.0) -> np.ndarray:
    """Точки на сфере (спираль Фибоначчи)."""
    i = np.arange(n) + 0.5
    phi = np.arccos(1.0 - 2.0 * i / n)
    theta = np.pi * (1.0 + 5.0 ** 0.5) * i
    return radius * np.column_stack([np.cos(theta) * np.sin(phi),
                                     np.sin(theta) * np.sin(phi),
                                     np.cos(phi)])


def make_rod(length: float = 10.0, radius: float = 0.5) -> np.ndarray:
    """Стержень вдоль x: кольца точек в плоскостях yz."""
    pts = []
    for x in np.linspace(-length, length, 41):
        for a in np.linspace(0.0, 2.0 * np.pi, 8, endpoint=False):
            pts.append([x, radius * np.cos(a), radius * np.sin(a)])
    return np.array(pts)


def make_disk(radius: float = 5.0, thickness: float = 0.2) -> np.ndarray:
    """Плоский диск в плоскости xy толщиной 2·thickness."""
    pts = [[0.0, 0.0, thickness], [0.0, 0.0, -thickness]]
    for r in np.linspace(1.0, radius, 5):
        for a in np.linspace(0.0, 2.0 * np.pi, 36, endpoint=False):
            for z in (-thickness, thickness):
                pts.append([r * np.cos(a), r * np.sin(a), z])
    return np.array(pts)


@pytest.fixture
def ball():
    return make_ball()


@pytest.fixture
def rod():
    return make_rod()


@pytest.fixture
def disk():
    return make_disk()


@pytest.fixture
def cloud(rng):
    """Анизотропное облако, повёрнутое и сдвинутое."""
    pts = rng.normal(size=(60, 3)) * np.array([4.0, 2.0, 0.5])
    q, _ = np.linalg.qr(rng.normal(size=(3, 3)))
    return pts @ q.T + np.array([3.0, -1.0, 2.0])


@pytest.fixture
def triangle_pair():
    """Два далёких треугольника (6 точек)."""
    return np.array([
        [0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0],
        [10.0, 10.0, 5.0], [11.0, 10.5, 5.0], [10.0, 11.0, 6.0],
    ])


# ----------------------------------------------------------------------
# Повороты
# ----------------------------------------------------------------------
def _axis_angle(axis, angle_deg) -> Quat:
    half = np.radians(angle_deg) / 2.0
    n = np.asarray(axis, dtype=np.float64)
    n = n / np.linalg.norm(n)
    return Quat(*(n * np.sin(half)), np.cos(half))


@pytest.fixture
def axis_angle():
    """Фабрика кватернионов: axis_angle(axis, angle_deg) -> Quat."""
    return _axis_angle

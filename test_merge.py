# -*- coding: utf-8 -*-
"""
Слияние объёмов: результат покрывает оба входа.
"""

import numpy as np
import pytest

from bvfit3d import fit, merge, OBB, RSS, KIOS, OBBRSS, Sphere
from bvfit3d.bv.obb import merge_obb_largedist, merge_obb_smalldist
from bvfit3d.math.frame import is_orthonormal


def _boxes(distance, rotation):
    b1 = OBB([0.0, 0.0, 0.0], np.identity(3), [1.0, 1.0, 1.0])
    rot = rotation([0, 0, 1], 30).to_mat3()
    b2 = OBB([distance, 0.5, 0.0], rot, [1.0, 0.5, 0.5])
    return b1, b2


@pytest.mark.parametrize("distance", [1.0, 10.0])
def test_obb_merge_contains_both(distance, axis_angle):
    b1, b2 = _boxes(distance, axis_angle)
    m = merge(b1, b2)
    assert isinstance(m, OBB)
    assert is_orthonormal(m.axis)
    assert m.contains_all(b1.vertices())
    assert m.contains_all(b2.vertices())
    assert m.volume() >= b1.volume() - 1e-9
    assert m.volume() >= b2.volume() - 1e-9


def test_obb_merge_paths(axis_angle):
    near1, near2 = _boxes(1.0, axis_angle)
    far1, far2 = _boxes(10.0, axis_angle)
    for m in (merge_obb_smalldist(near1, near2), merge_obb_largedist(far1, far2)):
        assert is_orthonormal(m.axis)
    far = merge_obb_largedist(far1, far2)
    # первая ось – вдоль линии центров
    d = far1.center - far2.center
    assert np.isclose(abs(far.axis[:, 0] @ d) / np.linalg.norm(d), 1.0)


def test_obb_merge_same_orientation():
    b1 = OBB([0.0, 0, 0], np.identity(3), [1.0, 1.0, 1.0])
    b2 = OBB([1.0, 0, 0], np.identity(3), [1.0, 1.0, 1.0])
    m = merge(b1, b2)
    assert np.allclose(m.axis, np.identity(3))
    assert np.allclose(m.center, [0.5, 0, 0])
    assert np.allclose(m.extent, [1.5, 1.0, 1.0])


def test_obb_merge_opposite_quaternion_sign(axis_angle):
    b1 = OBB([0.0, 0, 0], axis_angle([0, 1, 0], 10).to_mat3(), [1.0, 1.0, 1.0])
    b2 = OBB([0.5, 0, 0], axis_angle([0, 1, 0], 350).to_mat3(), [1.0, 1.0, 1.0])
    m = merge(b1, b2)
    assert is_orthonormal(m.axis)
    assert m.contains_all(np.vstack([b1.vertices(), b2.vertices()]))


def test_rss_merge_contains_both(cloud, rod):
    a = fit(cloud, "rss")
    b = fit(rod + np.array([20.0, 0.0, 0.0]), "rss")
    m = merge(a, b)
    assert isinstance(m, RSS)
    assert is_orthonormal(m.axis)
    assert m.contains_all(a.vertices())
    assert m.contains_all(b.vertices())
    assert m.contains_all(cloud)
    assert m.contains_all(rod + np.array([20.0, 0.0, 0.0]))


def test_kios_merge(ball, rod):
    shifted = rod + np.array([0.0, 30.0, 0.0])
    a = fit(ball, "kios")
    b = fit(shifted, "kios")
    m = merge(a, b)
    assert isinstance(m, KIOS)
    assert m.num_spheres == min(a.num_spheres, b.num_spheres)
    assert m.contains_all(ball)
    assert m.contains_all(shifted)
    assert m.obb.contains_all(a.obb.vertices())
    assert m.obb.contains_all(b.obb.vertices())


def test_kios_merge_keeps_common_spheres(disk):
    a = fit(disk, "kios")
    b = fit(disk + np.array([0.0, 0.0, 0.5]), "kios")
    m = merge(a, b)
    assert m.num_spheres == 3
    for i in range(3):
        for s in (a.spheres[i], b.spheres[i]):
            assert np.linalg.norm(s.center - m.spheres[i].center) + s.radius \
                <= m.spheres[i].radius + 1e-9


def test_obbrss_merge(cloud, disk):
    shifted = disk + np.array([5.0, 5.0, 5.0])
    a = fit(cloud, "obbrss")
    b = fit(shifted, "obbrss")
    m = merge(a, b)
    assert isinstance(m, OBBRSS)
    assert np.array_equal(m.obb.axis, m.rss.axis)
    assert m.contains_all(cloud)
    assert m.contains_all(shifted)


@pytest.mark.parametrize("kind", ["obb", "rss", "kios", "obbrss"])
def test_merge_does_not_modify_inputs(kind, cloud):
    a = fit(cloud, kind)
    b = fit(cloud + 3.0, kind)
    before = repr(a), repr(b)
    merge(a, b)
    assert (repr(a), repr(b)) == before


def test_method_merge(cloud):
    a = fit(cloud, "obb")
    b = fit(cloud * 0.5, "obb")
    m = a.merge(b)
    assert m.contains_all(cloud)
    assert m.contains_all(cloud * 0.5)


def test_merge_type_mismatch():
    with pytest.raises(TypeError):
        merge(OBB(), RSS())
    with pytest.raises(TypeError):
        merge(Sphere(), Sphere())

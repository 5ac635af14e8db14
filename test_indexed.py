# -*- coding: utf-8 -*-
"""
BVFitter: подгонка по подмножеству примитивов общего вершинного буфера.
"""

import numpy as np
import pytest

from bvfit3d import BVFitter, BVKind, TaskPool, OBB
from bvfit3d.fitting import OBBFitter, RSSFitter
from bvfit3d.geometry.source import PointSource

KINDS = ["obb", "rss", "kios", "obbrss"]


@pytest.fixture
def mesh(rng):
    vertices = rng.uniform(-5.0, 5.0, size=(30, 3))
    tris = rng.integers(0, 30, size=(20, 3))
    return vertices, tris


def gather(vertices, tris, subset):
    return vertices[tris[subset]].reshape(-1, 3)


@pytest.mark.parametrize("kind", KINDS)
def test_triangle_subset(kind, mesh):
    vertices, tris = mesh
    fitter = BVFitter(kind, vertices, tris)
    subset = [0, 3, 5, 7]
    bv = fitter.fit(subset)
    assert bv.contains_all(gather(vertices, tris, subset))


def test_matches_gathered_points(mesh):
    vertices, tris = mesh
    subset = [2, 4, 6, 8, 10]
    a = BVFitter("obb", vertices, tris).fit(subset)
    b = OBBFitter().fitn(PointSource.from_points(gather(vertices, tris, subset)))
    assert np.allclose(a.center, b.center)
    assert np.allclose(a.extent, b.extent)
    assert np.allclose(a.axis, b.axis)


def test_single_triangle_uses_general_path(mesh):
    vertices, tris = mesh
    bv = BVFitter("rss", vertices, tris).fit([1])
    assert bv.contains_all(gather(vertices, tris, [1]))


def test_flat_index_buffer(mesh):
    vertices, tris = mesh
    a = BVFitter("obb", vertices, tris.reshape(-1)).fit([1, 2, 3])
    b = BVFitter("obb", vertices, tris).fit([1, 2, 3])
    assert np.array_equal(a.extent, b.extent)


@pytest.mark.parametrize("kind", KINDS)
def test_swept_covers_both_frames(kind, mesh):
    vertices, tris = mesh
    prev = vertices + np.array([1.0, 2.0, 3.0])
    fitter = BVFitter(kind, vertices, tris, prev_vertices=prev)
    subset = [0, 1, 2]
    bv = fitter.fit(subset)
    assert bv.contains_all(gather(vertices, tris, subset))
    assert bv.contains_all(gather(prev, tris, subset))


def test_swept_point_count(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb", vertices, tris, prev_vertices=vertices * 2.0)
    src = fitter.source([0, 1, 2, 3])
    assert src.swept
    assert len(src) == 24


@pytest.mark.parametrize("kind", KINDS)
def test_point_cloud(kind, cloud):
    fitter = BVFitter(kind, cloud)
    assert fitter.is_pointcloud
    subset = [1, 4, 9, 16, 25]
    assert fitter.fit(subset).contains_all(cloud[subset])


def test_point_cloud_matches_fitn(cloud):
    subset = np.arange(0, 60, 3)
    a = BVFitter(BVKind.RSS, cloud).fit(subset)
    b = RSSFitter().fitn(PointSource.from_points(cloud[subset]))
    assert np.allclose(a.origin, b.origin)
    assert np.allclose(a.length, b.length)
    assert np.isclose(a.radius, b.radius)


def test_fit_many_with_pool(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb", vertices, tris)
    subsets = [[0, 1], [2, 3, 4], [5], [6, 7, 8, 9], [10, 11, 12]]
    serial = fitter.fit_many(subsets)
    with TaskPool(max_workers=3) as pool:
        parallel = fitter.fit_many(subsets, pool)
    assert len(parallel) == len(subsets)
    for a, b in zip(serial, parallel):
        assert isinstance(b, OBB)
        assert np.array_equal(a.center, b.center)
        assert np.array_equal(a.extent, b.extent)


def test_clear_and_reset(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb", vertices, tris)
    fitter.clear()
    with pytest.raises(RuntimeError):
        fitter.fit([0])
    fitter.set(vertices)
    assert fitter.is_pointcloud
    assert fitter.fit([0, 1, 2]).contains_all(vertices[:3])


def test_buffers_are_copied(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb", vertices, tris)
    before = fitter.fit([0, 1])
    vertices[:] = 0.0
    after = fitter.fit([0, 1])
    assert np.array_equal(before.extent, after.extent)


# ----------------------------------------------------------------------
# Ошибки
# ----------------------------------------------------------------------
def test_no_buffer():
    with pytest.raises(RuntimeError):
        BVFitter("kios").fit([0])


def test_invalid_buffers(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb")
    with pytest.raises(ValueError):
        fitter.set(vertices[:, :2])
    with pytest.raises(ValueError):
        fitter.set(vertices, tris, prev_vertices=vertices[:10])
    with pytest.raises(ValueError):
        fitter.set(vertices, tris + 100)
    with pytest.raises(ValueError):
        fitter.set(vertices, tris[:, :2])


def test_invalid_subsets(mesh):
    vertices, tris = mesh
    fitter = BVFitter("obb", vertices, tris)
    with pytest.raises(ValueError):
        fitter.fit([])
    with pytest.raises(ValueError):
        fitter.fit([20])
    with pytest.raises(ValueError):
        fitter.fit([-1])


def test_unknown_kind():
    with pytest.raises(ValueError):
        BVFitter("sphere")

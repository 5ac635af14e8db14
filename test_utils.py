# -*- coding: utf-8 -*-
import json
import logging
import os

import numpy as np
import pytest

from bvfit3d import fit, OBB
from bvfit3d.math.eigen import eigen
from bvfit3d.multithread import TaskPool
from bvfit3d.utils import Config, DEFAULT_CONFIG, Profiler, logger, set_level
from bvfit3d.utils.config import CONFIG_ENV


def _write_config(data):
    path = os.environ[CONFIG_ENV]
    with open(path, "w", encoding="utf-8") as f:
        if isinstance(data, str):
            f.write(data)
        else:
            json.dump(data, f)
    Config.reset()


def test_config_defaults():
    cfg = Config()
    for key, value in DEFAULT_CONFIG.items():
        assert cfg[key] == value
    assert Config() is cfg


def test_config_loads_file():
    _write_config({"eigen_solver": "jacobi", "containment_eps": 0.25})
    cfg = Config()
    assert cfg["eigen_solver"] == "jacobi"
    assert cfg["containment_eps"] == 0.25
    assert cfg["log_level"] == "INFO"


def test_config_broken_file_falls_back():
    _write_config("{not json")
    assert Config()["eigen_solver"] == "numpy"


def test_config_save_roundtrip():
    cfg = Config()
    cfg["max_workers"] = 2
    cfg.save()
    Config.reset()
    assert Config()["max_workers"] == 2


def test_config_solver_used_by_fitting(cloud):
    _write_config({"eigen_solver": "jacobi"})
    values, _ = eigen(np.diag([3.0, 1.0, 2.0]))
    assert np.allclose(np.sort(values), [1, 2, 3])
    assert fit(cloud, "obb").contains_all(cloud)


def test_config_unknown_solver(cloud):
    _write_config({"eigen_solver": "magic"})
    with pytest.raises(ValueError):
        fit(cloud, "obb")


def test_containment_eps_from_config():
    box = OBB([0.0, 0, 0], np.identity(3), [1.0, 1.0, 1.0])
    assert not box.contains([1.4, 0.0, 0.0])
    Config()["containment_eps"] = 0.5
    assert box.contains([1.4, 0.0, 0.0])
    assert not box.contains([1.4, 0.0, 0.0], eps=0.0)


def test_log_level_from_config():
    _write_config({"log_level": "DEBUG"})
    Config()
    try:
        assert logger.level == logging.DEBUG
    finally:
        set_level("INFO")


def test_lazy_config_keeps_user_log_level(cloud):
    Config.reset()
    set_level("DEBUG")
    try:
        fit(cloud, "obb")
        assert logger.level == logging.DEBUG
    finally:
        set_level("INFO")


def test_degenerate_input_logged(caplog):
    with caplog.at_level(logging.DEBUG, logger="bvfit3d"):
        fit(np.array([[1.0, 1, 1], [1.0, 1, 1]]), "obb")
    assert any("coincident" in r.getMessage() for r in caplog.records)


# ----------------------------------------------------------------------
# Profiler / TaskPool
# ----------------------------------------------------------------------
def test_profiler_measures():
    with Profiler("sum") as p:
        sum(range(10000))
    assert p.elapsed_ms >= 0.0


def test_task_pool_map_keeps_order():
    with TaskPool(max_workers=4) as pool:
        assert pool.map(lambda x: x * x, range(10)) == [x * x for x in range(10)]


def test_task_pool_map_leaves_queue_empty():
    with TaskPool(max_workers=2) as pool:
        assert pool.map(lambda x: x, range(5)) == [0, 1, 2, 3, 4]
        assert pool.tasks.empty()
        pool.submit(lambda: "mine")
        assert pool.wait_all() == ["mine"]


def test_task_pool_map_after_shutdown():
    pool = TaskPool(max_workers=1)
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.map(abs, [1, 2])


def test_task_pool_workers_from_config():
    _write_config({"max_workers": 2})
    with TaskPool() as pool:
        assert pool.max_workers == 2
        pool.submit(lambda: 1)
        pool.submit(lambda: 2)
        assert pool.wait_all() == [1, 2]


def test_task_pool_wait_all_raises():
    pool = TaskPool(max_workers=2)
    pool.submit(lambda: 1 / 0)
    with pytest.raises(ZeroDivisionError):
        pool.wait_all()
    pool.shutdown()


def test_task_pool_closed():
    pool = TaskPool()
    pool.shutdown()
    with pytest.raises(RuntimeError):
        pool.submit(print)

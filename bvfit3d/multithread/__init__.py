"""
Пакет multithread – пул потоков для пакетной подгонки BV.
"""

from bvfit3d.multithread.task_pool import TaskPool

__all__ = ["TaskPool"]

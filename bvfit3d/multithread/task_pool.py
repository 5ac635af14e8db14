# bvfit3d/multithread/task_pool.py
# ---------------------------------------------------------------
# Пул задач на основе concurrent.futures для подгонки BV соседних
# узлов BVH. numba‑ядра скомпилированы с nogil=True и отпускают GIL,
# поэтому потоки работают действительно параллельно.
# ---------------------------------------------------------------

from concurrent.futures import ThreadPoolExecutor
import queue

from bvfit3d.utils.config import Config
from bvfit3d.utils.logger import logger


class TaskPool:
    """Пул потоков; задачи принимаются как callables.

    max_workers=None – берётся Config()["max_workers"]
    (None и там – решает ThreadPoolExecutor).
    """
    def __init__(self, max_workers=None):
        if max_workers is None:
            max_workers = Config()["max_workers"]
        self.max_workers = max_workers
        self.executor = ThreadPoolExecutor(max_workers=max_workers,
                                           thread_name_prefix="bvfit3d")
        self.tasks = queue.Queue()
        self._shutdown = False
        logger.debug(f"[TaskPool] started, max_workers={max_workers}")

    def submit(self, fn, *args, **kwargs):
        """Отправить задачу в пул, вернуть Future."""
        if self._shutdown:
            raise RuntimeError("TaskPool already shut down")
        future = self.executor.submit(fn, *args, **kwargs)
        self.tasks.put(future)
        return future

    def map(self, fn, items):
        """fn над каждым элементом; результаты – в исходном порядке.

        Задачи map не попадают в очередь wait_all().
        """
        if self._shutdown:
            raise RuntimeError("TaskPool already shut down")
        futures = [self.executor.submit(fn, item) for item in items]
        return [f.result() for f in futures]

    def wait_all(self):
        """Дождаться всех поставленных задач, вернуть их результаты.

        Исключение задачи пробрасывается вызывающему.
        """
        results = []
        while not self.tasks.empty():
            results.append(self.tasks.get().result())
        return results

    def shutdown(self, wait=True):
        self._shutdown = True
        self.executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown(wait=True)

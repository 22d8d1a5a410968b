# pbrtscene/multithread/task_pool.py
# ---------------------------------------------------------------
# Простой пул задач на основе concurrent.futures.
# Загрузка и сохранение сцен уходят в фоновые потоки целиком,
# сам разбор внутри одной задачи однопоточный.
# ---------------------------------------------------------------

from concurrent.futures import ThreadPoolExecutor
import threading


class TaskPool:
    """Пул готового количества потоков; задачи принимаются как callables."""
    def __init__(self, max_workers=None):
        self.executor = ThreadPoolExecutor(max_workers=max_workers,
                                           thread_name_prefix="pbrtscene")
        # только незавершённые Future: готовые снимаются колбэком
        self._pending = set()
        self._lock = threading.Lock()
        self._shutdown = False

    def submit(self, fn, *args, **kwargs):
        """Отправить задачу в пул, вернуть Future."""
        if self._shutdown:
            raise RuntimeError("TaskPool already shut down")
        future = self.executor.submit(fn, *args, **kwargs)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._forget)
        return future

    def _forget(self, future):
        with self._lock:
            self._pending.discard(future)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def wait_all(self):
        """Блокировать до завершения всех поставленных задач."""
        with self._lock:
            futures = list(self._pending)
        for future in futures:
            future.result()  # пробрасывает исключения, если они возникли

    def shutdown(self, wait=True):
        self._shutdown = True
        self.executor.shutdown(wait=wait)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.shutdown()

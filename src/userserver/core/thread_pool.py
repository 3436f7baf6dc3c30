"""
=============================================================================
THREAD POOL
=============================================================================

A fixed set of worker threads pulling connections off a bounded queue.

=============================================================================
WHY A POOL?
=============================================================================

Each connection is handled synchronously from read to write, and a slow
store call blocks its connection for as long as it takes. Handling
connections on the accept thread would make every client wait behind the
slowest one; a thread per connection would be unbounded. The pool sits in
between:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                          THREAD POOL                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   accept loop ──submit()──► ┌──────────────────┐                     │
    │                             │ queue (bounded)  │                     │
    │                             └────────┬─────────┘                     │
    │                    ┌─────────────────┼─────────────────┐             │
    │                    ▼                 ▼                 ▼             │
    │               Worker-0          Worker-1          Worker-2           │
    │               conn A            conn B            (idle)             │
    │                                                                      │
    │   queue full → submit() returns False → caller drops the connection │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Handlers share no mutable state, so workers need no locking of their own.
Each one opens its own store connection; the store serializes writes.

=============================================================================
"""

import queue
import threading
import time
import logging
from dataclasses import dataclass, field
from typing import Callable, Any, Optional


logger = logging.getLogger(__name__)


@dataclass
class Task:
    """
    A deferred function call: "call func(*args) later".

    Attributes:
        func: The function to execute.
        args: Positional arguments for the function.
        submitted_at: Time the task was queued (for wait-time logging).
    """
    func: Callable[..., Any]
    args: tuple = ()
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Worker thread that processes tasks from the queue.

    Loop:
        1. Wait for a task (queue.get with timeout)
        2. None is the poison pill → exit
        3. Run the task; log any exception and keep going
        4. task_done()
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int, idle_timeout: float = 1.0):
        # daemon=True: a stuck worker never keeps the process alive
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout

        self._shutdown = threading.Event()

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            try:
                if task is None:
                    break
                self._execute_task(task)
            finally:
                self.task_queue.task_done()

        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute_task(self, task: Task):
        start_time = time.time()

        try:
            task.func(*task.args)
            logger.debug(
                f"Worker {self.worker_id} completed task in {time.time() - start_time:.3f}s "
                f"(queued {start_time - task.submitted_at:.3f}s)"
            )
        except Exception as e:
            # One bad task must not take the worker down with it
            logger.exception(f"Worker {self.worker_id} task failed: {e}")

    def shutdown(self):
        """Signal the worker to stop."""
        self._shutdown.set()


class ThreadPool:
    """
    Fixed-size thread pool.

        pool = ThreadPool(workers=4, queue_size=100)
        pool.start()
        pool.submit(process_connection, args=(conn,))
        pool.shutdown(wait=True)
    """

    def __init__(self, workers: int = 4, queue_size: int = 100):
        """
        Args:
            workers: Number of worker threads, all started by start().
            queue_size: Maximum tasks waiting for a worker.
        """
        self.workers = workers
        self.queue_size = queue_size

        # queue.Queue is thread-safe: no extra locking around put/get
        self._task_queue: queue.Queue[Optional[Task]] = queue.Queue(maxsize=queue_size)

        self._workers: list[Worker] = []
        self._started = False
        self._shutdown = False

    def start(self):
        """Create and start the worker threads."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.workers} workers")

        for worker_id in range(self.workers):
            worker = Worker(task_queue=self._task_queue, worker_id=worker_id)
            self._workers.append(worker)
            worker.start()

        self._shutdown = False
        self._started = True

    def submit(self, func: Callable[..., Any], args: tuple = ()) -> bool:
        """
        Queue a task without blocking.

        Returns:
            True if queued, False if the queue is full.

        Raises:
            RuntimeError: If the pool is not started or is shutting down.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        try:
            self._task_queue.put(Task(func=func, args=args), block=False)
        except queue.Full:
            return False
        return True

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop the pool.

        Args:
            wait: Let queued tasks finish first.
            timeout: Upper bound on the wait, in seconds.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if wait:
            deadline = time.time() + timeout if timeout else None
            while self._task_queue.unfinished_tasks:
                if deadline and time.time() > deadline:
                    logger.warning("Shutdown timeout, forcing stop")
                    break
                time.sleep(0.05)

        # One poison pill per worker
        for _ in self._workers:
            try:
                self._task_queue.put(None, block=False)
            except queue.Full:
                break  # Workers also exit on their shutdown flag

        for worker in self._workers:
            worker.shutdown()
            worker.join(timeout=2.0)

        self._workers.clear()
        self._started = False

        logger.info("Thread pool shutdown complete")


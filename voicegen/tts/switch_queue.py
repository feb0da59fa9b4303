"""
FIFO queue for GPT-SoVITS model switches.

The backend holds exactly one loaded GPT/SoVITS pair and changes it through two
separate calls. Two switches running at once could leave it with one model from
each request, so every switch goes through a single worker that drains an
``asyncio.Queue``:

- tasks run strictly in the order ``switch`` was called
- a task's two calls never interleave with another task's calls
- a failed task rejects only its own future; the worker moves on to the next
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Tuple

from .models import ModelSelection
from .sovits_client import SovitsApiClient

logger = logging.getLogger(__name__)

SwitchTask = Tuple[ModelSelection, "asyncio.Future[None]"]


class ModelSwitchSerializer:
    """Apply model switches against one backend, one at a time, in order."""

    def __init__(self, client: SovitsApiClient) -> None:
        self._client = client
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def pending(self) -> int:
        """Number of switches waiting behind the one currently running."""
        return self._queue.qsize() if self._queue is not None else 0

    def switch(self, selection: ModelSelection) -> "asyncio.Future[None]":
        """
        Queue a switch to ``selection`` and return a future for its outcome.

        The task is enqueued before this method returns, so the call order is
        the execution order. The future resolves to ``None`` once both weights
        are loaded, or fails with ``ModelSwitchError``. Must be called with a
        running event loop.
        """
        loop = asyncio.get_running_loop()
        self._ensure_worker()
        future: "asyncio.Future[None]" = loop.create_future()
        self._queue.put_nowait((selection, future))
        logger.debug("Queued model switch %s (%d ahead)", selection, self._queue.qsize() - 1)
        return future

    async def close(self) -> None:
        """Let queued switches finish, then stop the worker."""
        worker, queue = self._worker, self._queue
        if worker is None or worker.done():
            return
        queue.put_nowait(None)
        await worker
        if self._worker is not worker:
            # A switch() during shutdown restarted the worker on this queue.
            return
        # Switches queued behind the stop marker never ran.
        while not queue.empty():
            task = queue.get_nowait()
            if task is not None:
                task[1].cancel()

    async def __aenter__(self) -> "ModelSwitchSerializer":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    # -----------------------------------------------------------------------
    # Worker
    # -----------------------------------------------------------------------

    def _ensure_worker(self) -> None:
        loop = asyncio.get_running_loop()
        if self._worker is not None and not self._worker.done() and self._worker.get_loop() is loop:
            return
        # Tasks left on a same-loop queue (behind a stop marker) run on the new
        # worker; a queue from another event loop cannot be awaited here.
        if self._queue is None or self._worker is None or self._worker.get_loop() is not loop:
            self._queue = asyncio.Queue()
        self._worker = loop.create_task(
            self._drain(self._queue), name="model-switch-worker"
        )

    async def _drain(self, queue: asyncio.Queue) -> None:
        while True:
            task = await queue.get()
            try:
                if task is None:
                    return
                await self._run(task)
            finally:
                queue.task_done()

    async def _run(self, task: SwitchTask) -> None:
        selection, future = task
        logger.info(
            "Switching models to gpt=%s sovits=%s",
            selection.gpt_model,
            selection.sovits_model,
        )
        try:
            await self._client.set_gpt_weights(selection.gpt_model)
            await self._client.set_sovits_weights(selection.sovits_model)
        except Exception as exc:
            logger.error("Model switch to %s failed: %s", selection, exc)
            if not future.done():
                future.set_exception(exc)
            return

        logger.info("Both models switched successfully")
        if not future.done():
            future.set_result(None)

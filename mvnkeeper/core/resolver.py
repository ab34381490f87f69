"""Bounded-concurrency batch resolution for mvnkeeper.

:class:`ConcurrentUpdateResolver` runs one lookup per item of a batch on a
fixed number of asyncio worker tasks and either returns every result, in a
deterministic order, or fails the whole batch.

Each call builds its own worker group:

1. the (de-duplicated) items are queued;
2. exactly ``max_workers`` workers drain the queue, awaiting the lookup for
   one item at a time;
3. the first worker error cancels the remaining workers, waits for their
   teardown and is re-raised as a single :class:`MetadataRetrievalError`
   naming the whole batch. Results gathered so far are discarded.

The returned mapping is ordered by ``sort_key``, ties keeping input order, so
that completion timing never leaks into iteration order.

Typical usage::

    resolver = ConcurrentUpdateResolver()
    versions = await resolver.resolve_batch(
        dependencies,
        helper.lookup_dependency_updates,
        sort_key=dependency_sort_key,
        label="dependencies",
    )
"""

from __future__ import annotations

import asyncio
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Hashable,
    Iterable,
    List,
    Optional,
    TypeVar,
)

from mvnkeeper.constants import LOOKUP_PARALLEL_WORKERS
from mvnkeeper.exceptions import MetadataRetrievalError
from mvnkeeper.utils.logger import get_logger

logger = get_logger("resolver")

__all__ = ["ConcurrentUpdateResolver"]

ItemT = TypeVar("ItemT", bound=Hashable)
ResultT = TypeVar("ResultT")


class ConcurrentUpdateResolver:
    """Fan a batch of lookups out over a fixed-size worker group.

    Args:
        max_workers: Number of worker tasks per batch. Independent of the
            batch size and of the host's CPU count.

    Raises:
        ValueError: If ``max_workers`` is less than one.
    """

    def __init__(self, max_workers: int = LOOKUP_PARALLEL_WORKERS) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers

    async def resolve_batch(
        self,
        items: Iterable[ItemT],
        lookup: Callable[[ItemT], Awaitable[ResultT]],
        *,
        sort_key: Callable[[ItemT], Any],
        label: str = "items",
        describe: Callable[[ItemT], str] = str,
    ) -> Dict[ItemT, ResultT]:
        """Resolve every item and return the results in ``sort_key`` order.

        Args:
            items: Batch to resolve; duplicates are looked up once.
            lookup: Coroutine function producing the result for one item.
                It is awaited concurrently from several workers.
            sort_key: Key giving the order of the returned mapping. Items
                with equal keys keep their order in ``items``.
            label: Batch name used in the error message
                (``"dependencies"``, ``"plugins"``).
            describe: Renders an item for the error's coordinate list.

        Returns:
            Mapping of every item to its lookup result.

        Raises:
            MetadataRetrievalError: A lookup failed or was cancelled. The
                original error is chained as ``__cause__``.
            asyncio.CancelledError: The calling task was cancelled; the
                workers are cancelled and awaited, then the cancellation is
                re-raised rather than wrapped so ``asyncio.wait_for`` and
                other timeouts around this call keep working.
        """
        unique: List[ItemT] = list(dict.fromkeys(items))
        if not unique:
            return {}

        queue: "asyncio.Queue[ItemT]" = asyncio.Queue()
        for item in unique:
            queue.put_nowait(item)

        results: Dict[ItemT, ResultT] = {}
        workers = [
            asyncio.create_task(self._worker(queue, lookup, results))
            for _ in range(self.max_workers)
        ]

        try:
            await asyncio.wait(workers, return_when=asyncio.FIRST_EXCEPTION)
        except asyncio.CancelledError:
            logger.debug("Batch of %d %s cancelled by caller", len(unique), label)
            await self._teardown(workers)
            raise

        failure = self._first_failure(workers)
        if failure is not None:
            await self._teardown(workers)
            results.clear()
            coordinates = [describe(item) for item in unique]
            cause = str(failure) or failure.__class__.__name__
            raise MetadataRetrievalError(
                f"Unable to acquire metadata for {label} "
                f"[{', '.join(coordinates)}]: {cause}",
                coordinates=coordinates,
                original_error=failure,
            ) from failure

        logger.debug(
            "Resolved %d %s with %d workers", len(results), label, self.max_workers
        )
        # ties on sort_key keep input order
        return {item: results[item] for item in sorted(unique, key=sort_key)}

    @staticmethod
    async def _worker(
        queue: "asyncio.Queue[ItemT]",
        lookup: Callable[[ItemT], Awaitable[ResultT]],
        results: Dict[ItemT, ResultT],
    ) -> None:
        while True:
            try:
                item = queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            results[item] = await lookup(item)

    @staticmethod
    def _first_failure(workers: List["asyncio.Task[None]"]) -> Optional[BaseException]:
        """Return the first worker error in worker order, if any."""
        for task in workers:
            if not task.done():
                continue
            if task.cancelled():
                return asyncio.CancelledError()
            error = task.exception()
            if error is not None:
                return error
        return None

    @staticmethod
    async def _teardown(workers: List["asyncio.Task[None]"]) -> None:
        for task in workers:
            if not task.done():
                task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)

"""Asynchronous search for files and folders.

LocationQuery gathers every entry under its search scopes that satisfies a
predicate and hands the complete result list to a callback, once. The
gather runs on an executor so start() returns immediately.
"""

from __future__ import annotations

import fnmatch
import logging
import mimetypes
import os
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Executor, Future, ThreadPoolExecutor

from locus_fs.context import get_context
from locus_fs.enumeration import walk_entries
from locus_fs.location import Folder
from locus_fs.state import PathState
from locus_fs.types import SearchItem

logger = logging.getLogger(__name__)

SearchPredicate = Callable[[SearchItem], bool]
ResultsCallback = Callable[[list[SearchItem]], None]


class QueryCancelled(Exception):
    """Raised inside the gather when its query has been stopped."""

    pass


def make_search_item(path: str, state: PathState) -> SearchItem:
    """Describe a filesystem entry for predicates and results."""
    base_name = os.path.basename(path)
    is_folder = state == PathState.FOLDER
    size = None
    if not is_folder:
        try:
            size = os.lstat(path).st_size
        except OSError:
            size = None
    return SearchItem(
        path=path,
        base_name=base_name,
        display_name=base_name if is_folder else os.path.splitext(base_name)[0] or base_name,
        file_size=size,
        content_type="inode/directory" if is_folder else mimetypes.guess_type(path, strict=False)[0],
        kind="folder" if is_folder else "file",
    )


class LocationQuery:
    """A basic indexed-search style query over folder trees.

    Example:
        >>> query = LocationQuery(LocationQuery.name_matches("*.txt"), [Folder("~/Documents")])
        >>> query.start(lambda items: print(len(items)))  # doctest: +SKIP
    """

    def __init__(
        self,
        predicate: SearchPredicate | None = None,
        search_scopes: Iterable[Folder | str] = (),
        include_hidden: bool = False,
    ) -> None:
        """Initialize a query.

        Args:
            predicate: Accepts or rejects each entry. None matches everything.
            search_scopes: Folders (or folder paths) to search below.
            include_hidden: Also search hidden entries.
        """
        self.predicate = predicate
        self.search_scopes = list(search_scopes)
        self.include_hidden = include_hidden
        # Re-entrant so a callback may call stop() on its own query
        self._lock = threading.RLock()
        self._generation = 0
        self._running = False
        self._executor: ThreadPoolExecutor | None = None
        self._future: Future[None] | None = None

    @staticmethod
    def name_matches(pattern: str) -> SearchPredicate:
        """Predicate matching base names against a shell-style pattern."""
        return lambda item: fnmatch.fnmatch(item.base_name, pattern)

    @property
    def search_scopes(self) -> list[Folder]:
        """The folders searched by the query."""
        return list(self._search_scopes)

    @search_scopes.setter
    def search_scopes(self, scopes: Iterable[Folder | str]) -> None:
        self._search_scopes = [scope if isinstance(scope, Folder) else Folder(scope) for scope in scopes]

    @property
    def is_running(self) -> bool:
        with self._lock:
            return self._running

    def start(self, callback: ResultsCallback, executor: Executor | None = None) -> None:
        """Start gathering; callback receives the full result list once.

        Any query already running is stopped first, and its callback will
        not fire.

        Args:
            callback: Receives the list of SearchItem results.
            executor: Where the gather runs. Defaults to a private worker thread.
        """
        self.stop()

        with self._lock:
            self._generation += 1
            generation = self._generation
            self._running = True
            if executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="locus-fs-query")
                executor = self._executor
            self._future = executor.submit(self._run, generation, callback)

    def stop(self) -> None:
        """Stop a running query. Once this returns the callback cannot fire."""
        with self._lock:
            self._generation += 1
            self._running = False
            if self._future is not None:
                self._future.cancel()
                self._future = None
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None

    def _is_current(self, generation: int) -> bool:
        with self._lock:
            return self._running and self._generation == generation

    def _gather(self, generation: int) -> list[SearchItem]:
        context = get_context()
        results: list[SearchItem] = []
        for scope in self._search_scopes:
            if context.file_manager.classify(scope.path) != PathState.FOLDER:
                logger.debug("Skipping missing search scope %s", scope.path)
                continue
            for path, state in walk_entries(
                scope.path, shallow=False, include_hidden=self.include_hidden, context=context
            ):
                if not self._is_current(generation):
                    raise QueryCancelled()
                item = make_search_item(path, state)
                if self.predicate is None or self.predicate(item):
                    results.append(item)
        return results

    def _run(self, generation: int, callback: ResultsCallback) -> None:
        try:
            results = self._gather(generation)
        except QueryCancelled:
            logger.debug("Query cancelled during gather")
            return
        except Exception:
            logger.exception("Query gather failed")
            results = []

        # Delivery holds the lock so stop() waits for an in-flight callback
        with self._lock:
            if not (self._running and self._generation == generation):
                return
            self._running = False
            self._future = None
            executor, self._executor = self._executor, None
            try:
                callback(results)
            except Exception:
                logger.exception("Query callback failed")

        # The private worker is done once its only task has delivered
        if executor is not None:
            executor.shutdown(wait=False)

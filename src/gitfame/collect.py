from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed

from .blame import file_attributions
from .config import Config
from .git import list_files
from .models import Attribution, AuthorRecord, AuthorStats, FileProcessingError
from .paths import filter_files

ProgressFn = Callable[[int, int], None]


class StatsAggregator:
    """
    Shared per-author totals. Workers only go through `record` /
    `record_file`; every mutation happens under one lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._authors: dict[str, AuthorStats] = {}
        self._finalized = False

    def record(self, author: str, *, path: str, lines: int = 0, commit: str | None = None) -> None:
        with self._lock:
            if self._finalized:
                raise RuntimeError("aggregator already finalized")
            stats = self._authors.get(author)
            if stats is None:
                stats = AuthorStats(name=author)
                self._authors[author] = stats
            stats.lines += lines
            if commit:
                stats.commit_ids.add(commit)
            stats.file_paths.add(path)

    def record_file(self, path: str, attributions: Iterable[Attribution]) -> None:
        for a in attributions:
            self.record(a.author, path=path, lines=0 if a.created else a.lines, commit=a.commit)

    def finalize(self) -> list[AuthorRecord]:
        with self._lock:
            self._finalized = True
            records = [s.freeze() for s in self._authors.values()]
            self._authors = {}
        return records


def collect_stats(config: Config, *, progress: ProgressFn | None = None) -> list[AuthorRecord]:
    """
    Blame every file at `config.revision` that passes the filters and return
    unsorted per-author records. The first failing file aborts the run.
    """
    timeout_s = config.timeout_s or None  # 0 disables the per-call timeout
    files = list_files(config.repository, config.revision, timeout_s=timeout_s)
    selected = filter_files(files, config.extensions, config.excludes, config.restrict_to)

    agg = StatsAggregator()
    cancel = threading.Event()

    def process(path: str) -> None:
        attributions = file_attributions(
            config.repository,
            config.revision,
            path,
            use_committer=config.use_committer,
            timeout_s=timeout_s,
            cancel=cancel,
        )
        if cancel.is_set():
            return
        agg.record_file(path, attributions)

    with ThreadPoolExecutor(max_workers=config.jobs) as ex:
        futs: dict[Future[None], str] = {ex.submit(process, path): path for path in selected}
        for i, fut in enumerate(as_completed(futs), start=1):
            err = fut.exception()
            if err is not None:
                cancel.set()
                for other in futs:
                    other.cancel()
                raise FileProcessingError(futs[fut], err) from err
            if progress is not None:
                progress(i, len(futs))

    return agg.finalize()

from __future__ import annotations

import fnmatch
from collections.abc import Iterable, Sequence


def glob_match(pattern: str, path: str) -> bool:
    """
    Whole-path glob match where `*`, `?` and `[...]` never cross `/`:
    pattern and path are compared segment by segment.
    """
    pat_parts = pattern.split("/")
    path_parts = path.split("/")
    if len(pat_parts) != len(path_parts):
        return False
    return all(fnmatch.fnmatchcase(p, pat) for pat, p in zip(pat_parts, path_parts))


def matches_any_pattern(path: str, patterns: Iterable[str]) -> bool:
    for pat in patterns:
        if not pat:
            continue
        if glob_match(pat, path):
            return True
        # `dir/*` also covers everything below dir/, not just its direct children
        if pat.endswith("/*") and path.startswith(pat[:-1]):
            return True
    return False


def has_extension(path: str, extensions: Sequence[str]) -> bool:
    if not extensions:
        return True
    return any(path.endswith(ext) for ext in extensions)


def should_include_path(
    path: str,
    extensions: Sequence[str],
    excludes: Sequence[str],
    restrict_to: Sequence[str],
) -> bool:
    if not path:
        return False
    if not has_extension(path, extensions):
        return False
    if matches_any_pattern(path, excludes):
        return False
    if restrict_to and not matches_any_pattern(path, restrict_to):
        return False
    return True


def filter_files(
    files: Iterable[str],
    extensions: Sequence[str] = (),
    excludes: Sequence[str] = (),
    restrict_to: Sequence[str] = (),
) -> list[str]:
    return [f for f in files if should_include_path(f, extensions, excludes, restrict_to)]

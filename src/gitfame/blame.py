from __future__ import annotations

import threading
from pathlib import Path

from .git import DEFAULT_TIMEOUT_S, blame_porcelain, file_log
from .models import Attribution, BlameParseError

COMMIT_LEN = 40
COMMIT_LINE_MIN_LEN = 46
_HEX = frozenset("0123456789abcdefABCDEF")


def is_commit_line(line: str) -> bool:
    """
    True for `git blame --porcelain` header lines that open a group:

        <40-hex sha> <orig line> <final line> <lines in group>

    Continuation headers carry only three fields and are skipped, content
    lines start with a tab.
    """
    if len(line) < COMMIT_LINE_MIN_LEN or len(line.split(" ")) < 4:
        return False
    return all(c in _HEX for c in line[:COMMIT_LEN])


def _identity_after(lines: list[str], start: int, use_committer: bool) -> str:
    key = "committer " if use_committer else "author "
    for line in lines[start + 1 :]:
        if line.startswith("\t") or is_commit_line(line):
            break
        if line.startswith(key):
            return line[len(key) :]
    raise BlameParseError(f"no {key.strip()} field after blame header: {lines[start]!r}")


def parse_blame_porcelain(output: str, use_committer: bool = False) -> list[Attribution]:
    # only \n separates porcelain records; content lines may hold \r, \f, \x85 ...
    lines = output.split("\n")
    identities: dict[str, str] = {}
    out: list[Attribution] = []
    for i, line in enumerate(lines):
        if not is_commit_line(line):
            continue
        fields = line.split(" ")
        sha = fields[0]
        try:
            count = int(fields[3])
        except ValueError as e:
            raise BlameParseError(f"failed to parse commit line count {line!r}") from e

        author = identities.get(sha)
        if author is None:
            author = _identity_after(lines, i, use_committer)
            identities[sha] = author
        out.append(Attribution(commit=sha, author=author, lines=count))
    return out


def _person_name(value: str) -> str:
    # "Jane Doe <jane@example.com>" -> "Jane Doe"
    idx = value.find("<")
    if idx < 0:
        return value.strip()
    return value[:idx].rstrip()


def parse_creation_log(output: str, use_committer: bool = False) -> Attribution:
    """
    Take the first entry of `git log --pretty=fuller` output and credit its
    author (or committer) with the file.
    """
    lines = output.strip("\n").split("\n")
    if not lines or not lines[0].strip():
        raise BlameParseError("git log returned no commits")

    head = lines[0].split()
    if len(head) < 2 or head[0] != "commit":
        raise BlameParseError(f"unexpected git log header: {lines[0]!r}")
    sha = head[1]

    key = "Commit:" if use_committer else "Author:"
    for line in lines[1:]:
        if not line.strip():
            break
        if line.startswith(key):
            name = _person_name(line[len(key) :].strip())
            return Attribution(commit=sha, author=name, lines=0, created=True)
    raise BlameParseError(f"git log entry for {sha} has no {key} line")


def file_attributions(
    repo: Path,
    revision: str,
    path: str,
    *,
    use_committer: bool = False,
    timeout_s: int | None = DEFAULT_TIMEOUT_S,
    cancel: threading.Event | None = None,
) -> list[Attribution]:
    """
    Blame attributions for one file. Files without any blamed line (empty
    files) fall back to the commit that the log lists first.

    Returns an empty list without calling git once `cancel` is set.
    """
    if cancel is not None and cancel.is_set():
        return []
    out = blame_porcelain(repo, revision, path, timeout_s=timeout_s)
    attributions = parse_blame_porcelain(out, use_committer=use_committer)
    if attributions:
        return attributions

    if cancel is not None and cancel.is_set():
        return []
    log = file_log(repo, revision, path, timeout_s=timeout_s)
    return [parse_creation_log(log, use_committer=use_committer)]

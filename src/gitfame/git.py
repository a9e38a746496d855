from __future__ import annotations

import subprocess
from pathlib import Path

from .models import EnumerationError, GitError

DEFAULT_TIMEOUT_S = 300


def run_git(args: list[str], cwd: Path, timeout_s: int | None = DEFAULT_TIMEOUT_S) -> tuple[int, str, str]:
    try:
        proc = subprocess.run(
            ["git", *args],
            cwd=str(cwd),
            capture_output=True,
            timeout=timeout_s,
        )
    except OSError as e:
        raise GitError(f"git not found or bad repository path {cwd}: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise GitError(f"git {args[0]} timed out after {timeout_s}s") from e
    # decoded by hand: text mode would turn a lone \r inside file content into a line break
    out = proc.stdout.decode("utf-8", errors="replace")
    err = proc.stderr.decode("utf-8", errors="replace")
    return proc.returncode, out, err


def _checked(args: list[str], cwd: Path, timeout_s: int | None) -> str:
    code, out, err = run_git(args, cwd=cwd, timeout_s=timeout_s)
    if code != 0:
        raise GitError(f"git {args[0]} exited {code}: {err.strip()[:500]}")
    return out


def list_files(repo: Path, revision: str, timeout_s: int | None = DEFAULT_TIMEOUT_S) -> list[str]:
    # -z keeps paths unquoted, whatever core.quotePath says
    try:
        out = _checked(["ls-tree", "-r", "-z", "--name-only", revision], cwd=repo, timeout_s=timeout_s)
    except GitError as e:
        raise EnumerationError(f"failed to list files in repository: {e}") from e
    return [p for p in out.split("\0") if p]


def blame_porcelain(repo: Path, revision: str, path: str, timeout_s: int | None = DEFAULT_TIMEOUT_S) -> str:
    return _checked(["blame", "--porcelain", revision, "--", path], cwd=repo, timeout_s=timeout_s)


def file_log(repo: Path, revision: str, path: str, timeout_s: int | None = DEFAULT_TIMEOUT_S) -> str:
    return _checked(["log", "--pretty=fuller", revision, "--", path], cwd=repo, timeout_s=timeout_s)

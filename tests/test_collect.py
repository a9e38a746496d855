from __future__ import annotations

from pathlib import Path

import pytest

from gitfame.collect import collect_stats
from gitfame.config import Config
from gitfame.models import EnumerationError, FileProcessingError


def _stats(config: Config) -> dict[str, tuple[int, int, int]]:
    return {r.name: (r.lines, r.commits, r.files) for r in collect_stats(config)}


def test_one_commit_touching_two_files(repo) -> None:
    repo.write("a.txt", "1\n2\n3\n")
    repo.write("b.txt", "1\n2\n")
    repo.commit("init", author="Alice")

    assert _stats(Config(repository=repo.path, jobs=2)) == {"Alice": (5, 1, 2)}


def test_empty_file_credits_its_creator(repo) -> None:
    repo.write("a.txt", "1\n2\n")
    repo.commit("init", author="Alice")
    repo.write("empty.txt", "")
    repo.commit("add empty", author="Bob")

    assert _stats(Config(repository=repo.path)) == {"Alice": (2, 1, 1), "Bob": (0, 1, 1)}


def test_lines_sum_to_file_length_and_commits_dedupe(repo) -> None:
    repo.write("a.txt", "1\n2\n3\n4\n")
    repo.write("src/b.go", "package b\n")
    repo.commit("init", author="Alice")
    repo.write("a.txt", "1\nTWO\n3\n4\n5\n")
    repo.commit("edit", author="Bob")
    repo.write("src/c.go", "package c\n\nfunc C() {}\n")
    repo.commit("more", author="Bob")

    stats = _stats(Config(repository=repo.path, jobs=3))
    assert stats == {"Alice": (4, 1, 2), "Bob": (5, 2, 2)}
    assert sum(lines for lines, _, _ in stats.values()) == 5 + 1 + 3


def test_use_committer(repo) -> None:
    repo.write("a.txt", "1\n2\n")
    repo.write("empty.txt", "")
    repo.commit("init", author="Alice", committer="Carol")

    assert _stats(Config(repository=repo.path)) == {"Alice": (2, 1, 2)}
    assert _stats(Config(repository=repo.path, use_committer=True)) == {"Carol": (2, 1, 2)}


def test_filters_and_revision(repo) -> None:
    repo.write("main.go", "package main\n")
    repo.write("vendor/x/x.go", "package x\n\n")
    repo.write("build/output.bin", "bin\n")
    repo.write("README.md", "# hi\n")
    first = repo.commit("init", author="Alice")
    repo.write("later.go", "package later\n")
    repo.commit("later", author="Bob")

    cfg = Config(repository=repo.path, extensions=(".go",), excludes=("vendor/*",))
    assert _stats(cfg) == {"Alice": (1, 1, 1), "Bob": (1, 1, 1)}

    cfg = Config(repository=repo.path, revision=first, excludes=("build/*",), restrict_to=("*.md", "vendor/*"))
    assert _stats(cfg) == {"Alice": (3, 1, 2)}


def test_progress_callback(repo) -> None:
    for i in range(5):
        repo.write(f"f{i}.txt", "x\n")
    repo.commit("init", author="Alice")

    calls: list[tuple[int, int]] = []
    collect_stats(Config(repository=repo.path, jobs=2), progress=lambda done, total: calls.append((done, total)))
    assert [d for d, _ in calls] == [1, 2, 3, 4, 5]
    assert {t for _, t in calls} == {5}


def test_bad_revision_is_an_enumeration_error(repo) -> None:
    repo.write("a.txt", "1\n")
    repo.commit("init", author="Alice")
    with pytest.raises(EnumerationError):
        collect_stats(Config(repository=repo.path, revision="no-such-revision"))


def test_not_a_repository(tmp_path: Path) -> None:
    with pytest.raises(EnumerationError):
        collect_stats(Config(repository=tmp_path / "missing"))


def test_failing_blame_aborts_the_run(tmp_path: Path, fake_git) -> None:
    sha = "0123456789abcdef0123456789abcdef01234567"
    fake_git(
        [
            "args = sys.argv[1:]",
            "if args[0] == 'ls-tree':",
            "    sys.stdout.write('good.txt\\0bad.txt\\0')",
            "    return 0",
            "if args[0] == 'blame' and args[-1] == 'bad.txt':",
            "    sys.stderr.write('fatal: boom\\n')",
            "    return 128",
            "if args[0] == 'blame':",
            f"    sys.stdout.write('{sha} 1 1 1\\nauthor Alice\\n\\tx\\n')",
            "    return 0",
            "return 2",
        ]
    )
    with pytest.raises(FileProcessingError) as exc:
        collect_stats(Config(repository=tmp_path, jobs=2))
    assert exc.value.path == "bad.txt"
    assert "failed to process file bad.txt" in str(exc.value)
    assert "boom" in str(exc.value)


def test_malformed_creation_log_aborts_the_run(tmp_path: Path, fake_git) -> None:
    fake_git(
        [
            "args = sys.argv[1:]",
            "if args[0] == 'ls-tree':",
            "    sys.stdout.write('empty.txt\\0')",
            "    return 0",
            "if args[0] == 'blame':",
            "    return 0",
            "if args[0] == 'log':",
            "    sys.stdout.write('garbage\\n')",
            "    return 0",
            "return 2",
        ]
    )
    with pytest.raises(FileProcessingError, match="empty.txt"):
        collect_stats(Config(repository=tmp_path))


def test_carriage_returns_in_content_are_not_blame_records(repo) -> None:
    sha = b"0123456789abcdef0123456789abcdef01234567"
    repo.write_bytes("old.txt", b"notes\r" + sha + b" 1 1 7\rauthor Mallory\r")
    repo.write_bytes("older.txt", b"notes\r" + sha + b" fix the bug\r\n")
    repo.commit("init", author="Alice")

    assert _stats(Config(repository=repo.path)) == {"Alice": (2, 1, 2)}

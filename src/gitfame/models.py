from __future__ import annotations

import dataclasses


class GitFameError(Exception):
    """Base class for errors that abort a statistics run."""


class ConfigError(GitFameError):
    pass


class GitError(GitFameError):
    """A git invocation failed (non-zero exit, timeout, git not found)."""


class EnumerationError(GitError):
    pass


class BlameParseError(GitFameError):
    """Blame or log output did not have the expected shape."""


class FileProcessingError(GitFameError):
    def __init__(self, path: str, cause: BaseException) -> None:
        super().__init__(f"failed to process file {path}: {cause}")
        self.path = path
        self.cause = cause


@dataclasses.dataclass(frozen=True)
class Attribution:
    commit: str
    author: str
    lines: int = 0
    created: bool = False  # fallback entry from the creation log, never carries lines


@dataclasses.dataclass
class AuthorStats:
    name: str
    lines: int = 0
    commit_ids: set[str] = dataclasses.field(default_factory=set)
    file_paths: set[str] = dataclasses.field(default_factory=set)

    def freeze(self) -> AuthorRecord:
        return AuthorRecord(
            name=self.name,
            lines=self.lines,
            commits=len(self.commit_ids),
            files=len(self.file_paths),
        )


@dataclasses.dataclass(frozen=True)
class AuthorRecord:
    name: str
    lines: int = 0
    commits: int = 0
    files: int = 0

    def as_dict(self) -> dict[str, object]:
        return {"name": self.name, "lines": self.lines, "commits": self.commits, "files": self.files}

from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path

import pytest


class Repo:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.git("init", "-q")
        self.git("config", "commit.gpgsign", "false")
        self.git("config", "core.autocrlf", "false")
        self.git("config", "user.name", "Repo User")
        self.git("config", "user.email", "repo@example.com")

    def git(self, *args: str, env: dict[str, str] | None = None) -> str:
        proc = subprocess.run(["git", *args], cwd=str(self.path), env=env, check=True, capture_output=True, text=True)
        return proc.stdout

    def write(self, name: str, text: str) -> None:
        p = self.path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(text, encoding="utf-8")
        self.git("add", name)

    def write_bytes(self, name: str, data: bytes) -> None:
        p = self.path / name
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_bytes(data)
        self.git("add", name)

    def commit(self, message: str, *, author: str, committer: str | None = None) -> str:
        committer = committer or author
        env = os.environ.copy()
        env["GIT_AUTHOR_NAME"] = author
        env["GIT_AUTHOR_EMAIL"] = f"{author.lower()}@example.com"
        env["GIT_COMMITTER_NAME"] = committer
        env["GIT_COMMITTER_EMAIL"] = f"{committer.lower()}@example.com"
        env["GIT_AUTHOR_DATE"] = "2025-01-01T00:00:00Z"
        env["GIT_COMMITTER_DATE"] = "2025-01-01T00:00:00Z"
        self.git("commit", "-q", "-m", message, env=env)
        return self.git("rev-parse", "HEAD").strip()


@pytest.fixture
def repo(tmp_path: Path) -> Repo:
    path = tmp_path / "repo"
    path.mkdir()
    return Repo(path)


@pytest.fixture
def fake_git(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Install an executable `git` ahead of the real one; its main() is `body`."""

    def install(body: list[str]) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        fake = bin_dir / "git"
        fake.write_text(
            "\n".join(
                [
                    f"#!{sys.executable}",
                    "import sys",
                    "",
                    "def main() -> int:",
                    *["    " + line for line in body],
                    "",
                    "if __name__ == '__main__':",
                    "    raise SystemExit(main())",
                ]
            )
            + "\n",
            encoding="utf-8",
        )
        fake.chmod(0o755)
        monkeypatch.setenv("PATH", str(bin_dir) + os.pathsep + os.environ.get("PATH", ""))
        return fake

    return install

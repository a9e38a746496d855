from __future__ import annotations

import dataclasses
import json
import os
import sys
from collections.abc import Iterable
from pathlib import Path

from .git import DEFAULT_TIMEOUT_S
from .languages import find_language, load_language_table
from .models import ConfigError

VALID_ORDER_BY = ("lines", "commits", "files")
VALID_FORMATS = ("tabular", "csv", "json", "json-lines")


def default_jobs() -> int:
    return max(1, min(8, (os.cpu_count() or 4)))


@dataclasses.dataclass(frozen=True)
class Config:
    repository: Path = Path(".")
    revision: str = "HEAD"
    order_by: str = "lines"
    fmt: str = "tabular"
    use_committer: bool = False
    extensions: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    restrict_to: tuple[str, ...] = ()
    jobs: int = dataclasses.field(default_factory=default_jobs)
    timeout_s: int = DEFAULT_TIMEOUT_S


def validate(config: Config) -> None:
    if config.fmt not in VALID_FORMATS:
        raise ConfigError(f"invalid format: {config.fmt}")
    if config.order_by not in VALID_ORDER_BY:
        raise ConfigError(f"invalid order-by: {config.order_by}")
    if config.jobs < 1:
        raise ConfigError(f"invalid jobs: {config.jobs} (must be >= 1)")
    if config.timeout_s < 0:
        raise ConfigError(f"invalid timeout: {config.timeout_s}")


def load_config(config_path: Path | None) -> dict:
    if config_path is None or not config_path.exists():
        return {}
    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"failed to read config {config_path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config {config_path} must contain a JSON object")
    return data


def resolve_languages(languages: Iterable[str], table: list[dict] | None = None) -> tuple[list[str], list[str]]:
    """
    Map language names (case-insensitive) to their extensions.
    Returns (extensions, unknown names); unknown names keep input order.
    """
    wanted: list[str] = []
    for lang in languages:
        key = lang.strip().lower()
        if key and key not in wanted:
            wanted.append(key)
    if not wanted:
        return [], []

    if table is None:
        table = load_language_table()

    extensions: list[str] = []
    unknown: list[str] = []
    for lang in wanted:
        entry = find_language(lang, table)
        if entry is None:
            unknown.append(lang)
            continue
        extensions.extend(str(e) for e in entry.get("extensions") or [])
    return extensions, unknown


def _as_list(value: object) -> list[str]:
    if value is None:
        return []
    values = [value] if isinstance(value, str) else list(value)
    out: list[str] = []
    for v in values:
        for part in str(v).split(","):
            part = part.strip()
            if part:
                out.append(part)
    return out


def build_config(options: dict, *, warn=None) -> Config:
    """
    Build a validated Config from merged option values (config file under
    command line). Unknown language names are reported through `warn` and
    otherwise ignored.
    """
    languages = _as_list(options.get("languages"))
    extensions = _as_list(options.get("extensions"))
    lang_exts, unknown = resolve_languages(languages)

    use_committer = options.get("use_committer", False)
    if use_committer is None:
        use_committer = False
    if not isinstance(use_committer, bool):
        raise ConfigError(f"invalid use_committer: {use_committer!r} (must be true or false)")

    jobs = options.get("jobs")
    timeout = options.get("timeout")
    try:
        config = Config(
            repository=Path(options.get("repository") or "."),
            revision=str(options.get("revision") or "HEAD"),
            order_by=str(options.get("order_by") or "lines"),
            fmt=str(options.get("format") or "tabular"),
            use_committer=use_committer,
            extensions=tuple(extensions + lang_exts),
            languages=tuple(languages),
            excludes=tuple(_as_list(options.get("exclude"))),
            restrict_to=tuple(_as_list(options.get("restrict_to"))),
            jobs=default_jobs() if jobs is None else int(jobs),
            timeout_s=DEFAULT_TIMEOUT_S if timeout is None else int(timeout),
        )
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid option value: {e}") from e
    validate(config)

    if unknown:
        msg = f"Warning: undefined languages: {', '.join(unknown)}"
        if warn is None:
            print(msg, file=sys.stderr)
        else:
            warn(msg)
    return config

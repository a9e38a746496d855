from __future__ import annotations

from collections.abc import Iterable

from .models import AuthorRecord, ConfigError

# primary key first, then the two fallbacks
SORT_FIELDS: dict[str, tuple[str, str, str]] = {
    "lines": ("lines", "commits", "files"),
    "commits": ("commits", "lines", "files"),
    "files": ("files", "lines", "commits"),
}


def sort_key(order_by: str):
    try:
        a, b, c = SORT_FIELDS[order_by]
    except KeyError:
        raise ConfigError(f"invalid order-by: {order_by}") from None

    def key(r: AuthorRecord) -> tuple[int, int, int, str]:
        return (-getattr(r, a), -getattr(r, b), -getattr(r, c), r.name)

    return key


def sort_stats(records: Iterable[AuthorRecord], order_by: str = "lines") -> list[AuthorRecord]:
    return sorted(records, key=sort_key(order_by))

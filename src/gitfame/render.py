from __future__ import annotations

import csv
import io
import json
import sys
from typing import TextIO

from .models import AuthorRecord, ConfigError

HEADER = ["Name", "Lines", "Commits", "Files"]


def _row(r: AuthorRecord) -> list[str]:
    return [r.name, str(r.lines), str(r.commits), str(r.files)]


def render_tabular(records: list[AuthorRecord]) -> str:
    rows = [HEADER] + [_row(r) for r in records]
    # every column but the last is padded to its widest cell plus one space
    widths = [max(len(row[i]) for row in rows) + 1 for i in range(len(HEADER) - 1)]
    lines = []
    for row in rows:
        cells = [cell.ljust(w) for cell, w in zip(row, widths)]
        lines.append("".join(cells) + row[-1])
    return "\n".join(lines) + "\n"


def render_csv(records: list[AuthorRecord]) -> str:
    buf = io.StringIO()
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(HEADER)
    for r in records:
        writer.writerow(_row(r))
    return buf.getvalue()


def _json(obj: object) -> str:
    return json.dumps(obj, ensure_ascii=False, separators=(",", ":"))


def render_json(records: list[AuthorRecord]) -> str:
    return _json([r.as_dict() for r in records]) + "\n"


def render_json_lines(records: list[AuthorRecord]) -> str:
    return "".join(_json(r.as_dict()) + "\n" for r in records)


RENDERERS = {
    "tabular": render_tabular,
    "csv": render_csv,
    "json": render_json,
    "json-lines": render_json_lines,
}


def render(records: list[AuthorRecord], fmt: str) -> str:
    try:
        fn = RENDERERS[fmt]
    except KeyError:
        raise ConfigError(f"invalid format: {fmt}") from None
    return fn(records)


def write_report(records: list[AuthorRecord], fmt: str, stream: TextIO | None = None) -> None:
    out = sys.stdout if stream is None else stream
    out.write(render(records, fmt))
    out.flush()

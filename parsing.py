"""Comma-separated text parsing into header-keyed raw rows.

The splitter is deliberately naive: every comma separates a field, quoted
fields containing commas are split like any other, and tokens beyond the header
count are dropped. Column meaning is resolved later by the reconciler.
"""

from __future__ import annotations

from typing import Any

import pandas as pd

from logging_setup import get_logger

SUPPORTED_EXTENSIONS = (".csv",)
BYTE_ORDER_MARK = "\ufeff"

logger = get_logger("ledgerlens.parsing")

RawRow = dict[str, str]


class ParseError(ValueError):
    """Tabular input that cannot produce at least one data row."""


def _clean_token(token: str) -> str:
    value = token.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        value = value[1:-1]
    return value


def _split_line(line: str) -> list[str]:
    return [_clean_token(token) for token in line.split(",")]


def parse_csv_text(raw_text: str) -> list[RawRow]:
    """Parse pasted or uploaded CSV text into one mapping per data line."""
    lines = [line for line in str(raw_text or "").split("\n") if line.strip()]
    if len(lines) < 2:
        logger.warning("Rejected tabular input with %d non-empty line(s)", len(lines))
        raise ParseError("insufficient rows")

    header_line = lines[0]
    if header_line.startswith(BYTE_ORDER_MARK):
        header_line = header_line[len(BYTE_ORDER_MARK) :]
    headers = _split_line(header_line)

    rows: list[RawRow] = []
    for line in lines[1:]:
        values = _split_line(line)
        rows.append({header: values[idx] if idx < len(values) else "" for idx, header in enumerate(headers)})
    return rows


def read_uploaded_csv(uploaded_file: Any) -> str:
    """Return the text of an uploaded ``.csv`` file."""
    name = str(getattr(uploaded_file, "name", "")).lower()
    if not name.endswith(SUPPORTED_EXTENSIONS):
        raise ParseError(f"Unsupported file type: {name or '<unknown>'}. Please upload a .csv file.")

    payload = uploaded_file.getvalue() if hasattr(uploaded_file, "getvalue") else uploaded_file.read()
    if isinstance(payload, str):
        return payload
    try:
        return payload.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ParseError(f"Could not decode {name} as UTF-8 text.") from exc


def parse_uploaded_csv(uploaded_file: Any) -> list[RawRow]:
    return parse_csv_text(read_uploaded_csv(uploaded_file))


def raw_rows_frame(rows: list[RawRow]) -> pd.DataFrame:
    """Tabular preview of a parsed batch, columns in header order."""
    if not rows:
        return pd.DataFrame()
    return pd.DataFrame(rows, columns=list(rows[0].keys()))

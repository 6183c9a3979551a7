"""Decoding of scorer-app CSV exports into normalized record frames."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Iterable, Mapping, NamedTuple, Optional, Union

import numpy as np
import pandas as pd

from .schema import (
    BATTING,
    INNINGS_HEADERS,
    PITCHING,
    PLATE_APPEARANCE_HEADERS,
    Kind,
    header_map,
    schema_for,
)

logger = logging.getLogger(__name__)

BOM = "\ufeff"

Rows = Union[pd.DataFrame, Iterable[Mapping], None]


class LoadedFile(NamedTuple):
    kind: Optional[str]
    frame: pd.DataFrame


def _to_text(value) -> str:
    if value is None or (not isinstance(value, str) and pd.isna(value)):
        return ""
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
    return str(value).strip()


def _coerce_numeric(series: pd.Series, field: str) -> pd.Series:
    if pd.api.types.is_bool_dtype(series):
        series = series.astype(int)
    if pd.api.types.is_numeric_dtype(series):
        numeric = series.astype(float)
    else:
        text = series.map(_to_text)
        numeric = pd.to_numeric(text.where(text != "", np.nan), errors="coerce")
        unreadable = int((numeric.isna() & (text != "")).sum())
        if unreadable:
            logger.debug("Coerced %d non-numeric %r value(s) to 0", unreadable, field)
    numeric = numeric.fillna(0)
    if len(numeric) == 0 or (numeric % 1 == 0).all():
        return numeric.astype("int64")
    return numeric


def _infer_column(series: pd.Series) -> pd.Series:
    """Numeric when every non-empty cell is numeric, trimmed text otherwise."""
    if pd.api.types.is_numeric_dtype(series):
        return series
    text = series.map(_to_text)
    filled = text != ""
    if not filled.any():
        return text.astype(object)
    numeric = pd.to_numeric(text.where(filled, np.nan), errors="coerce")
    if numeric[filled].notna().all():
        return numeric
    return text.astype(object)


def as_frame(rows: Rows, kind: str) -> pd.DataFrame:
    """Normalize raw rows of ``kind`` into a frame with one column per schema field.

    ``rows`` may be a DataFrame (raw export headers or field names) or any
    iterable of mappings. Known columns are typed from the schema, missing ones
    are added (0 for counts, "" for text), and ``player_key`` is derived as the
    player id, or the name when the id is blank. The input is never mutated.
    """
    schema = schema_for(kind)
    if rows is None:
        frame = pd.DataFrame()
    elif isinstance(rows, pd.DataFrame):
        frame = rows.copy()
    else:
        frame = pd.DataFrame(list(rows))

    frame.columns = [str(c).lstrip(BOM).strip() for c in frame.columns]
    frame = frame.rename(columns=header_map(kind))
    frame = frame.loc[:, ~frame.columns.duplicated()]
    frame = frame.reset_index(drop=True)

    known = []
    for column in schema:
        known.append(column.field)
        if column.field not in frame.columns:
            if column.kind is Kind.NUMERIC:
                frame[column.field] = 0
            else:
                frame[column.field] = pd.Series("", index=frame.index, dtype=object)
            continue
        if column.kind is Kind.NUMERIC:
            frame[column.field] = _coerce_numeric(frame[column.field], column.field)
        else:
            frame[column.field] = frame[column.field].map(_to_text).astype(object)

    extra = [c for c in frame.columns if c not in known and c != "player_key"]
    for name in extra:
        frame[name] = _infer_column(frame[name])

    frame["player_key"] = frame["player_id"].where(frame["player_id"] != "", frame["name"])
    return frame[known + extra + ["player_key"]]


def _split_records(text: str) -> pd.DataFrame:
    text = text.lstrip(BOM)
    if not text.strip():
        return pd.DataFrame()

    width = len(pd.read_csv(io.StringIO(text), nrows=0).columns)
    frame = pd.read_csv(
        io.StringIO(text),
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
        index_col=False,
        engine="python",
        # extra trailing fields are cut to the header width
        on_bad_lines=lambda fields: fields[:width],
    )
    frame.columns = [str(c).strip() for c in frame.columns]
    frame = frame.loc[:, ~frame.columns.duplicated()]
    for column in frame.columns:
        frame[column] = frame[column].fillna("").astype(str).str.strip()

    # a line holding only its first field carries no stats
    kept = pd.Series(False, index=frame.index)
    for column in frame.columns[1:]:
        kept |= frame[column] != ""
    if not kept.all():
        logger.debug("Dropped %d line(s) with fewer than two fields", int((~kept).sum()))
    return frame[kept].reset_index(drop=True)


def detect_kind(filename: str, frame: pd.DataFrame) -> Optional[str]:
    """Guess whether an export holds batting or pitching rows."""
    name = filename or ""
    columns = set(frame.columns)
    if "_b.csv" in name or columns.intersection(PLATE_APPEARANCE_HEADERS):
        return BATTING
    if "_p.csv" in name or columns.intersection(INNINGS_HEADERS):
        return PITCHING
    return None


def normalize(rows: Rows, kind: Optional[str] = None) -> pd.DataFrame:
    """``as_frame`` with the kind detected from the columns when not given."""
    if kind is None:
        if rows is None:
            frame = pd.DataFrame()
        elif isinstance(rows, pd.DataFrame):
            frame = rows
        else:
            frame = pd.DataFrame(list(rows))
        kind = detect_kind("", frame) or BATTING
        rows = frame
    return as_frame(rows, kind)


def read_csv_text(text: str, kind: Optional[str] = None) -> pd.DataFrame:
    """Decode export text. With ``kind`` the result is normalized through the schema."""
    frame = _split_records(text)
    if kind is None:
        return frame
    return as_frame(frame, kind)


def load_csv(path, kind: Optional[str] = None) -> LoadedFile:
    """Read an export from disk, detecting its kind from the name and headers when not given."""
    path = Path(path)
    raw = _split_records(path.read_text(encoding="utf-8"))
    kind = kind or detect_kind(path.name, raw)
    if kind is None:
        logger.info("Could not tell whether %s holds batting or pitching rows", path.name)
        return LoadedFile(None, raw)
    frame = as_frame(raw, kind)
    logger.info("Loaded %d %s row(s) from %s", len(frame), kind, path.name)
    return LoadedFile(kind, frame)


__all__ = [
    "BATTING",
    "PITCHING",
    "LoadedFile",
    "as_frame",
    "detect_kind",
    "load_csv",
    "normalize",
    "read_csv_text",
]

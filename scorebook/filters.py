"""Date parsing and row filtering (date range, team keyword, category)."""

from __future__ import annotations

import logging
import re
import warnings
from dataclasses import dataclass, fields
from datetime import date, timedelta
from typing import Mapping, Optional, Union

import pandas as pd

from .records import Rows, normalize

logger = logging.getLogger(__name__)

# Returned for dates that cannot be read, so comparisons stay well defined
EPOCH = date(1970, 1, 1)

ALL_CATEGORIES = "all"

_CAMEL_CASE = {"startDate": "start_date", "endDate": "end_date", "teamKeyword": "team_keyword"}

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _leading_int(part: str) -> Optional[int]:
    match = _LEADING_INT.match(part)
    return int(match.group(1)) if match else None


def parse_date_or_none(value) -> Optional[date]:
    """Parse ``YYYY-MM-DD`` / ``YYYY/MM/DD``, then any format pandas understands.

    Returns ``None`` when neither works.
    """
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None

    parts = re.split(r"[-/]", text)
    if len(parts) == 3:
        year, month, day = (_leading_int(p) for p in parts)
        if year is not None and month is not None and day is not None:
            try:
                return date(year, month, day)
            except ValueError:
                pass

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            stamp = pd.to_datetime(text, errors="coerce")
        except (ValueError, TypeError, OverflowError):
            return None
    if pd.isna(stamp):
        return None
    return stamp.date()


def parse_date(value) -> date:
    """Like :func:`parse_date_or_none` but unreadable dates become :data:`EPOCH`."""
    parsed = parse_date_or_none(value)
    return EPOCH if parsed is None else parsed


@dataclass(frozen=True)
class FilterCriteria:
    start_date: str = ""
    end_date: str = ""
    team_keyword: str = ""
    category: str = ALL_CATEGORIES

    @classmethod
    def from_mapping(cls, values: Mapping) -> "FilterCriteria":
        """Build criteria from a mapping; camelCase names are accepted too."""
        known = {f.name for f in fields(cls)}
        criteria = {}
        unknown = []
        for key, value in values.items():
            name = _CAMEL_CASE.get(key, key)
            if name not in known:
                unknown.append(key)
            elif value is not None:
                criteria[name] = value
        if unknown:
            raise ValueError(f"Unknown filter criteria: {', '.join(sorted(map(str, unknown)))}")
        return cls(**criteria)


def keyword_matcher(keyword: str):
    """Case-insensitive regex predicate, or a substring one if ``keyword`` is not a valid pattern."""
    try:
        pattern = re.compile(keyword, re.IGNORECASE)
    except re.error:
        logger.debug("Team keyword %r is not a valid pattern; matching as plain text", keyword)
        lowered = keyword.lower()
        return lambda text: lowered in text.lower()
    return lambda text: pattern.search(text) is not None


def filter_rows(
    rows: Rows,
    criteria: Union[FilterCriteria, Mapping, None] = None,
    kind: Optional[str] = None,
) -> pd.DataFrame:
    """Keep the rows that pass every active criterion.

    The start date is inclusive and the end date covers the whole end day.
    The team keyword is tried against both the home and away team names.
    Category ``"all"`` disables the category check. Without criteria every
    row passes.
    """
    frame = normalize(rows, kind)
    if criteria is None:
        return frame
    if not isinstance(criteria, FilterCriteria):
        criteria = FilterCriteria.from_mapping(criteria)

    mask = pd.Series(True, index=frame.index)

    if criteria.start_date or criteria.end_date:
        dates = frame["date"].map(parse_date)
        if criteria.start_date:
            start = parse_date(criteria.start_date)
            mask &= dates.map(lambda d: d >= start).astype(bool)
        end_day = parse_date(criteria.end_date) if criteria.end_date else None
        if end_day is not None and end_day < date.max:
            end = end_day + timedelta(days=1)
            mask &= dates.map(lambda d: d < end).astype(bool)

    if criteria.team_keyword:
        matches = keyword_matcher(criteria.team_keyword)
        mask &= frame["away_team"].map(matches).astype(bool) | frame["home_team"].map(matches).astype(bool)

    if criteria.category is not None and criteria.category != ALL_CATEGORIES:
        mask &= frame["title"] == criteria.category

    return frame[mask].reset_index(drop=True)

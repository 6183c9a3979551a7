"""Rankings and correlation point sets built from player summaries."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Mapping, Optional, Union

import pandas as pd
from scipy import stats

from .schema import BATTING, PITCHING
from .stats import format_rate, is_integral

logger = logging.getLogger(__name__)

LOWER_IS_BETTER = {"era", "whip"}
LEADING_ZERO_FREE = {"avg", "obp"}

BATTING_BOARD = ("avg", "ops", "obp", "slg", "hr", "rbi", "sb", "bb")
PITCHING_BOARD = ("era", "whip", "so", "win", "kbb", "display_innings", "sv")

RANK_COLUMNS = ["player_key", "name", "value", "display_value"]
POINT_COLUMNS = ["player_key", "name", "x", "y", "z"]

Summaries = Union[pd.DataFrame, Iterable[Mapping]]


def _as_summaries(summaries: Summaries) -> pd.DataFrame:
    if isinstance(summaries, pd.DataFrame):
        return summaries
    return pd.DataFrame(list(summaries))


def _summary_kind(frame: pd.DataFrame, kind: Optional[str]) -> str:
    if kind is not None:
        if kind not in (BATTING, PITCHING):
            raise ValueError(f"Unknown record kind: {kind!r}")
        return kind
    return PITCHING if "innings_val" in frame.columns else BATTING


def _value_column(metric: str) -> str:
    # innings are shown as "5.2" but ranked on their numeric value
    return "innings_val" if metric == "display_innings" else metric


def _eligible(frame: pd.DataFrame, kind: str, minimum) -> pd.DataFrame:
    usage = "innings_val" if kind == PITCHING else "pa"
    if usage not in frame.columns:
        return frame
    return frame[pd.to_numeric(frame[usage], errors="coerce").fillna(0) >= (minimum or 0)]


def _display(value, metric: str, kind: str, row) -> str:
    if pd.isna(value):
        return "-"
    if metric == "display_innings":
        return str(row["display_innings"])
    if kind == BATTING and metric in LEADING_ZERO_FREE:
        return format_rate(float(value))
    if is_integral(value):
        return str(int(value))
    return f"{float(value):.2f}" if kind == PITCHING else f"{float(value):.3f}"


def rank(
    summaries: Summaries,
    metric: str,
    minimum: float = 0,
    kind: Optional[str] = None,
) -> pd.DataFrame:
    """Order players by ``metric``, best first.

    Players below ``minimum`` usage (plate appearances, or innings for
    pitchers) are left out. ERA and WHIP rank ascending, everything else
    descending; missing values always go last.
    """
    frame = _as_summaries(summaries)
    if frame.empty:
        return pd.DataFrame(columns=RANK_COLUMNS)
    kind = _summary_kind(frame, kind)
    column = _value_column(metric)
    if column not in frame.columns:
        raise ValueError(f"Unknown {kind} metric: {metric!r}")

    eligible = _eligible(frame, kind, minimum)
    values = pd.to_numeric(eligible[column], errors="coerce")
    ranked = pd.DataFrame(
        {
            "player_key": eligible.get("player_key", eligible.get("name")),
            "name": eligible.get("name"),
            "value": values,
            "display_value": [
                _display(v, metric, kind, row) for v, (_, row) in zip(values, eligible.iterrows())
            ],
        }
    )
    ranked = ranked.sort_values(
        "value", ascending=metric in LOWER_IS_BETTER, na_position="last", kind="mergesort"
    )
    return ranked[RANK_COLUMNS].reset_index(drop=True)


def leaderboard(
    batting: Summaries,
    pitching: Summaries,
    min_pa: float = 0,
    min_innings: float = 0,
    top: Optional[int] = 10,
) -> Dict[str, pd.DataFrame]:
    """The standard set of batting and pitching leader lists, keyed ``"<kind>:<metric>"``."""
    board = {}
    for metric in BATTING_BOARD:
        board[f"{BATTING}:{metric}"] = rank(batting, metric, min_pa, BATTING)
    for metric in PITCHING_BOARD:
        board[f"{PITCHING}:{metric}"] = rank(pitching, metric, min_innings, PITCHING)
    if top is not None:
        board = {key: table.head(top).reset_index(drop=True) for key, table in board.items()}
    return board


def correlate(
    summaries: Summaries,
    x_metric: str,
    y_metric: str,
    size_metric: Optional[str] = None,
    minimum: float = 0,
    kind: Optional[str] = None,
) -> pd.DataFrame:
    """Scatter points ``(x, y, z)`` per eligible player.

    ``z`` only sizes the point: OPS for batters, innings for pitchers
    unless ``size_metric`` says otherwise.
    """
    frame = _as_summaries(summaries)
    if frame.empty:
        return pd.DataFrame(columns=POINT_COLUMNS)
    kind = _summary_kind(frame, kind)
    size_metric = size_metric or ("innings_val" if kind == PITCHING else "ops")
    columns = [_value_column(m) for m in (x_metric, y_metric, size_metric)]
    for metric, column in zip((x_metric, y_metric, size_metric), columns):
        if column not in frame.columns:
            raise ValueError(f"Unknown {kind} metric: {metric!r}")

    eligible = _eligible(frame, kind, minimum)
    points = pd.DataFrame(
        {
            "player_key": eligible.get("player_key", eligible.get("name")),
            "name": eligible.get("name"),
            "x": pd.to_numeric(eligible[columns[0]], errors="coerce"),
            "y": pd.to_numeric(eligible[columns[1]], errors="coerce"),
            "z": pd.to_numeric(eligible[columns[2]], errors="coerce"),
        }
    )
    return points[POINT_COLUMNS].reset_index(drop=True)


def pearson(points: pd.DataFrame) -> float:
    """Pearson r between ``x`` and ``y``; 0.0 when it is not defined."""
    if points is None or points.empty:
        return 0.0
    pairs = points[["x", "y"]].apply(pd.to_numeric, errors="coerce").dropna()
    if len(pairs) < 3 or pairs["x"].nunique() < 2 or pairs["y"].nunique() < 2:
        return 0.0
    r, _ = stats.pearsonr(pairs["x"], pairs["y"])
    return round(float(r), 3)

"""Time-period bucketing for trend charts.

Rows are grouped into game, monthly or quarterly buckets. A bucket can be
read two ways:

* snapshot: rates from that bucket's own counting stats (team panels);
* cumulative: rates from everything up to and including that bucket
  (player career-to-date lines).

Both readings share :func:`accumulate`; :func:`snapshot_of` and
:func:`cumulative_through` are the single-bucket forms of the two.
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from .aggregation import add_batting_rates, add_pitching_rates
from .filters import parse_date_or_none
from .records import Rows, as_frame
from .schema import BATTING, counting_fields
from .stats import GAME_INNINGS, safe_div

logger = logging.getLogger(__name__)

GAME = "game"
MONTHLY = "monthly"
QUARTERLY = "quarterly"
GRANULARITIES = (GAME, MONTHLY, QUARTERLY)

SNAPSHOT = "snapshot"
CUMULATIVE = "cumulative"
MODES = (SNAPSHOT, CUMULATIVE)

UNKNOWN_OPPONENT = "unknown"


def _check(value: str, allowed, what: str) -> None:
    if value not in allowed:
        raise ValueError(f"Unknown {what}: {value!r} (expected one of {allowed})")


def period_key(date_text, granularity: str) -> Optional[str]:
    """Bucket key for a row date, or ``None`` if the date cannot be read."""
    _check(granularity, GRANULARITIES, "granularity")
    parsed = parse_date_or_none(date_text)
    if parsed is None:
        return None
    if granularity == GAME:
        return str(date_text).strip()
    if granularity == QUARTERLY:
        return f"{parsed.year}-Q{(parsed.month - 1) // 3 + 1}"
    return f"{parsed.year}-{parsed.month:02d}"


def resolve_opponent(
    home_team: str,
    away_team: str,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> str:
    """The team we played: the away side when the home side is one of our aliases."""
    home_team = home_team or ""
    away_team = away_team or ""
    ours_at_home = any(alias and alias in home_team for alias in home_team_aliases)
    opponent = away_team if ours_at_home else home_team
    return opponent or unknown


def accumulate(
    rows: Rows,
    granularity: str = MONTHLY,
    kind: str = BATTING,
    label_opponent: bool = False,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> pd.DataFrame:
    """Sum counting stats per period, one row per bucket in chronological order.

    Rows whose date cannot be read have no period and are left out. With
    ``label_opponent`` game keys read ``"<date> vs <opponent>"``.
    """
    _check(granularity, GRANULARITIES, "granularity")
    counting = list(counting_fields(kind))
    frame = as_frame(rows, kind)
    aliases = tuple(home_team_aliases)

    keys = frame["date"].map(lambda text: period_key(text, granularity))
    dated = keys.notna()
    if not dated.all():
        logger.debug("Left %d row(s) with unreadable dates out of the %s buckets", int((~dated).sum()), granularity)

    frame = frame[dated]
    if frame.empty:
        return pd.DataFrame(columns=["period_key", "opponent"] + counting)

    keys = keys[dated].astype(str)
    opponents = pd.Series(
        [resolve_opponent(h, a, aliases, unknown) for h, a in zip(frame["home_team"], frame["away_team"])],
        index=frame.index,
        dtype=object,
    )
    if label_opponent and granularity == GAME:
        keys = keys + " vs " + opponents

    frame = frame.assign(
        period_key=keys,
        opponent=opponents,
        _day=frame["date"].map(lambda text: parse_date_or_none(text).toordinal()),
    )

    grouped = frame.groupby("period_key", sort=False)
    buckets = grouped[counting].sum()
    buckets["opponent"] = grouped["opponent"].first() if granularity == GAME else ""
    buckets["_day"] = grouped["_day"].min()
    buckets = buckets.reset_index().sort_values(["_day", "period_key"], kind="mergesort")
    return buckets[["period_key", "opponent"] + counting].reset_index(drop=True)


def derive_rates(buckets: pd.DataFrame, kind: str = BATTING) -> pd.DataFrame:
    """Trend rates computed from each row's counting stats."""
    if kind == BATTING:
        out = add_batting_rates(buckets)
        out["plate_appearances"] = out["ab"] + out["bb"] + out["hbp"] + out["sf"]
        out["bb_rate"] = np.round(safe_div(out["bb"] + out["hbp"], out["plate_appearances"]) * 100, 1)
        out["so_rate"] = np.round(safe_div(out["so"], out["plate_appearances"]) * 100, 1)
        return out

    out = add_pitching_rates(buckets)
    out["bbhbp"] = out["bb"] + out["hbp"]
    out["k_per7"] = np.round(safe_div(out["so"] * GAME_INNINGS, out["innings_val"]), 2)
    out["bb_per7"] = np.round(safe_div(out["bbhbp"] * GAME_INNINGS, out["innings_val"]), 2)
    out["strike_rate"] = np.round(safe_div(out["strikes"], out["pitches"]) * 100, 1)
    return out


def snapshot_of(bucket: pd.Series, kind: str = BATTING) -> pd.Series:
    """Rates for one bucket from its own counting stats."""
    return derive_rates(bucket.to_frame().T.infer_objects(), kind).iloc[0]


def cumulative_through(buckets: pd.DataFrame, k: int, kind: str = BATTING) -> pd.Series:
    """Rates over buckets ``0..k`` inclusive, labelled with bucket ``k``'s key."""
    counting = list(counting_fields(kind))
    upto = buckets.iloc[: k + 1]
    merged = upto[counting].sum()
    for label in ("period_key", "opponent"):
        if label in buckets.columns:
            merged[label] = buckets.iloc[k][label]
    return snapshot_of(merged, kind)


def bucket(
    rows: Rows,
    granularity: str = MONTHLY,
    mode: str = SNAPSHOT,
    kind: str = BATTING,
    label_opponent: bool = False,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> pd.DataFrame:
    """Bucket rows by period and derive trend rates in ``mode``.

    In cumulative mode the plain counting columns hold running totals and
    ``period_<stat>`` columns hold each bucket's own counts.
    """
    _check(mode, MODES, "mode")
    buckets = accumulate(rows, granularity, kind, label_opponent, home_team_aliases, unknown)
    if mode == SNAPSHOT:
        return derive_rates(buckets, kind)

    counting = list(counting_fields(kind))
    running = buckets.copy()
    for field in counting:
        running[f"period_{field}"] = buckets[field]
        running[field] = buckets[field].cumsum()
    return derive_rates(running, kind)


def team_trend(
    rows: Rows,
    granularity: str = MONTHLY,
    kind: str = BATTING,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> pd.DataFrame:
    """Independent per-period team numbers; game buckets are labelled with the opponent."""
    return bucket(rows, granularity, SNAPSHOT, kind, True, home_team_aliases, unknown)


def player_trend(
    rows: Rows,
    player_key: str,
    granularity: str = MONTHLY,
    kind: str = BATTING,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> pd.DataFrame:
    """Career-to-date line for one player (matched on player id, else name)."""
    frame = as_frame(rows, kind)
    mine = frame[frame["player_key"] == player_key]
    return bucket(mine, granularity, CUMULATIVE, kind, False, home_team_aliases, unknown)

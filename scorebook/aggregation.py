"""Player-level aggregation of batting and pitching rows, plus team totals."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from .records import Rows, as_frame
from .schema import BATTING, BATTING_COUNTING, PITCHING, PITCHING_COUNTING
from .stats import GAME_INNINGS, display_innings, innings_pitched, safe_div

logger = logging.getLogger(__name__)

IDENTITY_COLUMNS = ["player_key", "player_id", "name", "number", "games"]
BATTING_RATE_COLUMNS = ["singles", "total_bases", "avg", "obp", "slg", "ops", "bb_k", "iso_d"]
PITCHING_RATE_COLUMNS = ["display_innings", "innings_val", "era", "whip", "kbb"]

BATTING_SUMMARY_COLUMNS = IDENTITY_COLUMNS + list(BATTING_COUNTING) + BATTING_RATE_COLUMNS
PITCHING_SUMMARY_COLUMNS = IDENTITY_COLUMNS + list(PITCHING_COUNTING) + PITCHING_RATE_COLUMNS


def add_batting_rates(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``frame`` with rate stats derived from its counting columns.

    ``ops`` and ``iso_d`` are built from the already rounded ``obp``, ``slg``
    and ``avg``, so a row always satisfies ``ops == round(obp + slg, 3)``.
    """
    out = frame.copy()
    singles = out["h"] - out["doubles"] - out["triples"] - out["hr"]
    out["singles"] = singles
    out["total_bases"] = singles + 2 * out["doubles"] + 3 * out["triples"] + 4 * out["hr"]

    out["avg"] = np.round(safe_div(out["h"], out["ab"]), 3)
    on_base = out["h"] + out["bb"] + out["hbp"]
    chances = out["ab"] + out["bb"] + out["hbp"] + out["sf"]
    out["obp"] = np.round(safe_div(on_base, chances), 3)
    out["slg"] = np.round(safe_div(out["total_bases"], out["ab"]), 3)
    out["ops"] = np.round(out["obp"] + out["slg"], 3)
    out["bb_k"] = np.round(safe_div(out["bb"] + out["hbp"], out["so"]), 2)
    out["iso_d"] = np.round(out["obp"] - out["avg"], 3)
    return out


def add_pitching_rates(frame: pd.DataFrame) -> pd.DataFrame:
    """Return a copy of ``frame`` with innings, ERA, WHIP and K/BB on the 7-inning scale."""
    out = frame.copy()
    innings = innings_pitched(out["outs"])
    out["display_innings"] = out["outs"].map(display_innings)
    out["innings_val"] = innings
    out["era"] = np.round(safe_div(out["er"] * GAME_INNINGS, innings), 2)
    out["whip"] = np.round(safe_div(out["bb"] + out["hbp"] + out["h"], innings), 2)
    out["kbb"] = np.round(safe_div(out["so"], out["bb"]), 2)
    return out


def _group_players(frame: pd.DataFrame, counting) -> pd.DataFrame:
    grouped = frame.groupby("player_key", sort=False)
    identity = grouped[["player_id", "name", "number"]].first()
    identity["games"] = grouped.size()
    return identity.join(grouped[list(counting)].sum()).reset_index()


def aggregate_batting(rows: Rows) -> pd.DataFrame:
    """One summary row per player, best batting average first."""
    frame = as_frame(rows, BATTING)
    if frame.empty:
        return pd.DataFrame(columns=BATTING_SUMMARY_COLUMNS)
    summary = add_batting_rates(_group_players(frame, BATTING_COUNTING))
    summary = summary.sort_values("avg", ascending=False, kind="mergesort")
    logger.debug("Aggregated %d batting row(s) into %d player(s)", len(frame), len(summary))
    return summary[BATTING_SUMMARY_COLUMNS].reset_index(drop=True)


def aggregate_pitching(rows: Rows) -> pd.DataFrame:
    """One summary row per pitcher, lowest ERA first."""
    frame = as_frame(rows, PITCHING)
    if frame.empty:
        return pd.DataFrame(columns=PITCHING_SUMMARY_COLUMNS)
    summary = add_pitching_rates(_group_players(frame, PITCHING_COUNTING))
    summary = summary.sort_values("era", ascending=True, kind="mergesort")
    logger.debug("Aggregated %d pitching row(s) into %d player(s)", len(frame), len(summary))
    return summary[PITCHING_SUMMARY_COLUMNS].reset_index(drop=True)


@dataclass(frozen=True)
class TeamTotals:
    games: int
    avg: float
    runs: int
    hr: int
    era: float


def team_totals(batting: Rows, pitching: Rows) -> Optional[TeamTotals]:
    """Headline team numbers; ``None`` when there are no batting rows."""
    bat = as_frame(batting, BATTING)
    if bat.empty:
        return None
    pitch = as_frame(pitching, PITCHING)

    game_ids = bat.loc[bat["game_id"] != "", "game_id"]
    innings = innings_pitched(pitch["outs"].sum())
    return TeamTotals(
        games=int(game_ids.nunique()),
        avg=round(safe_div(bat["h"].sum(), bat["ab"].sum()), 3),
        runs=bat["runs"].sum().item(),
        hr=bat["hr"].sum().item(),
        era=round(safe_div(pitch["er"].sum() * GAME_INNINGS, innings), 2),
    )


def list_categories(batting: Rows) -> list:
    titles = as_frame(batting, BATTING)["title"]
    return sorted(t for t in titles.unique() if t)


def list_players(batting: Rows, pitching: Rows) -> pd.DataFrame:
    """Distinct players across both record kinds, ordered by jersey number.

    A jersey that does not start with digits sorts as 999.
    """
    columns = ["player_key", "name", "number"]
    people = pd.concat(
        [as_frame(batting, BATTING)[columns], as_frame(pitching, PITCHING)[columns]],
        ignore_index=True,
    ).drop_duplicates("player_key", keep="first")
    # jersey "0" sorts as 0; only a jersey without leading digits sorts last
    jersey = pd.to_numeric(people["number"].astype(str).str.extract(r"^\s*(\d+)")[0], errors="coerce")
    people = people.assign(_jersey=jersey.fillna(999))
    people = people.sort_values("_jersey", kind="mergesort")
    return people[columns].reset_index(drop=True)

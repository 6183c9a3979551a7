"""Game-by-game results rebuilt from batting and pitching rows."""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

from .filters import parse_date
from .records import Rows, as_frame
from .schema import BATTING, PITCHING
from .trends import UNKNOWN_OPPONENT, resolve_opponent

logger = logging.getLogger(__name__)

WIN, LOSS, TIE = "W", "L", "T"

GAME_COLUMNS = [
    "game_id",
    "date",
    "opponent",
    "score",
    "runs_scored",
    "runs_allowed",
    "result",
    "wins",
    "games_played",
    "win_pct",
    "label",
]


def _label(date_text: str, opponent: str) -> str:
    return f"{date_text[5:].replace('-', '/', 1)} vs {opponent}"


def derive_games(
    batting: Rows,
    pitching: Rows,
    home_team_aliases: Iterable[str] = (),
    unknown: str = UNKNOWN_OPPONENT,
) -> pd.DataFrame:
    """One row per game id found in the batting rows, in date order.

    Runs scored come from the batting rows and runs allowed from pitching
    rows with the same game id; pitching rows for other games are ignored.
    ``win_pct`` is the running winning percentage through each game.
    """
    bat = as_frame(batting, BATTING)
    pitch = as_frame(pitching, PITCHING)
    bat = bat[bat["game_id"] != ""]
    if bat.empty:
        return pd.DataFrame(columns=GAME_COLUMNS)

    grouped = bat.groupby("game_id", sort=False)
    games = grouped[["date", "home_team", "away_team", "score"]].first()
    games["runs_scored"] = grouped["runs"].sum()

    ours = pitch[pitch["game_id"].isin(games.index)]
    allowed = ours.groupby("game_id")["r"].sum()
    games["runs_allowed"] = allowed.reindex(games.index, fill_value=0)
    if len(ours) < len(pitch):
        logger.debug("Ignored %d pitching row(s) for games without batting rows", len(pitch) - len(ours))

    aliases = tuple(home_team_aliases)
    games["opponent"] = [
        resolve_opponent(h, a, aliases, unknown) for h, a in zip(games["home_team"], games["away_team"])
    ]
    games["_day"] = games["date"].map(lambda text: parse_date(text).toordinal())
    games = games.reset_index().sort_values("_day", kind="mergesort").reset_index(drop=True)

    scored = games["runs_scored"]
    conceded = games["runs_allowed"]
    games["result"] = np.select([scored > conceded, scored < conceded], [WIN, LOSS], default=TIE)
    games["wins"] = (games["result"] == WIN).cumsum()
    games["games_played"] = np.arange(1, len(games) + 1)
    games["win_pct"] = np.round(games["wins"] / games["games_played"], 3)
    games["label"] = [_label(d, o) for d, o in zip(games["date"], games["opponent"])]
    return games[GAME_COLUMNS]

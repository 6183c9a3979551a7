"""Column schema for scorer-app box-score exports.

Each export column maps to an internal field name and a kind. The kind is
fixed here once, so the decoder never has to guess whether a cell such as
a jersey number ``"07"`` is text or a count.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple

BATTING = "batting"
PITCHING = "pitching"
RECORD_KINDS = (BATTING, PITCHING)


class Kind(Enum):
    TEXT = "text"
    IDENTIFIER = "identifier"
    NUMERIC = "numeric"


@dataclass(frozen=True)
class Column:
    field: str
    headers: Tuple[str, ...]
    kind: Kind


# Identity, date and team fields shared by both record kinds
COMMON_COLUMNS = (
    Column("player_id", ("選手ID", "player_id"), Kind.IDENTIFIER),
    Column("name", ("名前", "name"), Kind.TEXT),
    Column("number", ("背番号", "number"), Kind.IDENTIFIER),
    Column("game_id", ("試合ID", "game_id"), Kind.IDENTIFIER),
    Column("date", ("日付", "date"), Kind.TEXT),
    Column("score", ("スコア", "score"), Kind.TEXT),
    Column("category", ("カテゴリ", "category"), Kind.TEXT),
    Column("venue", ("球場", "venue"), Kind.TEXT),
    Column("title", ("タイトル", "title"), Kind.TEXT),
    Column("away_team", ("先攻", "away_team"), Kind.TEXT),
    Column("home_team", ("後攻", "home_team"), Kind.TEXT),
)

BATTING_COLUMNS = COMMON_COLUMNS + (
    Column("pa", ("打席数", "pa"), Kind.NUMERIC),
    Column("ab", ("打数", "ab"), Kind.NUMERIC),
    Column("h", ("安打", "h"), Kind.NUMERIC),
    Column("doubles", ("二塁打", "doubles"), Kind.NUMERIC),
    Column("triples", ("三塁打", "triples"), Kind.NUMERIC),
    Column("hr", ("本塁打", "hr"), Kind.NUMERIC),
    Column("rbi", ("打点", "rbi"), Kind.NUMERIC),
    Column("runs", ("得点", "runs"), Kind.NUMERIC),
    Column("so", ("三振", "so"), Kind.NUMERIC),
    Column("bb", ("四球", "bb"), Kind.NUMERIC),
    Column("hbp", ("死球", "hbp"), Kind.NUMERIC),
    Column("sb", ("盗塁", "sb"), Kind.NUMERIC),
    Column("sf", ("犠飛", "sf"), Kind.NUMERIC),
    Column("sac", ("犠打", "sac"), Kind.NUMERIC),
)

PITCHING_COLUMNS = COMMON_COLUMNS + (
    Column("outs", ("アウト数", "outs"), Kind.NUMERIC),
    Column("h", ("安打", "h"), Kind.NUMERIC),
    Column("r", ("失点", "r"), Kind.NUMERIC),
    Column("er", ("自責点", "er"), Kind.NUMERIC),
    Column("bb", ("四球", "bb"), Kind.NUMERIC),
    Column("hbp", ("死球", "hbp"), Kind.NUMERIC),
    Column("so", ("三振", "so"), Kind.NUMERIC),
    Column("win", ("勝数", "win"), Kind.NUMERIC),
    Column("loss", ("負数", "loss"), Kind.NUMERIC),
    Column("sv", ("セーブ", "sv"), Kind.NUMERIC),
    Column("strikes", ("S数", "strikes"), Kind.NUMERIC),
    Column("pitches", ("球数", "pitches"), Kind.NUMERIC),
)

SCHEMAS: Dict[str, Tuple[Column, ...]] = {
    BATTING: BATTING_COLUMNS,
    PITCHING: PITCHING_COLUMNS,
}

BATTING_COUNTING = tuple(c.field for c in BATTING_COLUMNS if c.kind is Kind.NUMERIC)
PITCHING_COUNTING = tuple(c.field for c in PITCHING_COLUMNS if c.kind is Kind.NUMERIC)

# Headers that mark a file as batting or pitching when the file name does not
PLATE_APPEARANCE_HEADERS = ("打席数", "pa")
INNINGS_HEADERS = ("投球回", "innings", "球数", "pitches", "アウト数", "outs")


def schema_for(kind: str) -> Tuple[Column, ...]:
    if kind not in SCHEMAS:
        raise ValueError(f"Unknown record kind: {kind!r} (expected one of {RECORD_KINDS})")
    return SCHEMAS[kind]


def counting_fields(kind: str) -> Tuple[str, ...]:
    schema_for(kind)
    return BATTING_COUNTING if kind == BATTING else PITCHING_COUNTING


def header_map(kind: str) -> Dict[str, str]:
    """Map every accepted header spelling to its field name."""
    mapping = {}
    for column in schema_for(kind):
        for header in column.headers:
            mapping[header] = column.field
    return mapping

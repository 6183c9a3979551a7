"""Shared row factories for the scorebook tests."""

import pytest

from scorebook.schema import BATTING_COUNTING, PITCHING_COUNTING


def _row(counting, defaults, overrides):
    row = {
        "player_id": "p1",
        "name": "Sato",
        "number": "1",
        "game_id": "g1",
        "date": "2025-04-06",
        "score": "",
        "title": "Spring League",
        "away_team": "Hawks",
        "home_team": "Ants",
    }
    row.update({field: 0 for field in counting})
    row.update(defaults)
    row.update(overrides)
    return row


@pytest.fixture
def batting_row():
    """Build one batting row; any field can be overridden by keyword."""
    return lambda **overrides: _row(BATTING_COUNTING, {}, overrides)


@pytest.fixture
def pitching_row():
    """Build one pitching row; any field can be overridden by keyword."""
    return lambda **overrides: _row(PITCHING_COUNTING, {"player_id": "p9", "name": "Ito"}, overrides)

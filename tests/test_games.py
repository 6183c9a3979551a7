"""Tests for game-by-game results."""

from scorebook.games import GAME_COLUMNS, derive_games


class TestDeriveGames:
    """Tests for derive_games()."""

    def test_results_and_running_win_pct(self, batting_row, pitching_row):
        batting = [
            batting_row(game_id="g2", date="2025-05-11", runs=3, home_team="Eagles", away_team="Ants"),
            batting_row(game_id="g1", date="2025-04-06", runs=4),
            batting_row(game_id="g1", date="2025-04-06", player_id="p2", runs=1),
        ]
        pitching = [
            pitching_row(game_id="g1", date="2025-04-06", r=2),
            pitching_row(game_id="g2", date="2025-05-11", r=4),
        ]
        games = derive_games(batting, pitching, home_team_aliases=("Ants",))
        assert list(games["game_id"]) == ["g1", "g2"]
        assert list(games["runs_scored"]) == [5, 3]
        assert list(games["runs_allowed"]) == [2, 4]
        assert list(games["result"]) == ["W", "L"]
        assert list(games["wins"]) == [1, 1]
        assert list(games["games_played"]) == [1, 2]
        assert list(games["win_pct"]) == [1.0, 0.5]

    def test_opponent_and_label(self, batting_row):
        batting = [
            batting_row(game_id="g1", date="2025-04-06", away_team="Hawks", home_team="Ants"),
            batting_row(game_id="g2", date="2025-05-11", away_team="Ants", home_team="Eagles"),
        ]
        games = derive_games(batting, [], home_team_aliases=("Ants",))
        assert list(games["opponent"]) == ["Hawks", "Eagles"]
        assert list(games["label"]) == ["04/06 vs Hawks", "05/11 vs Eagles"]

    def test_pitching_for_other_games_is_ignored(self, batting_row, pitching_row):
        batting = [batting_row(game_id="g1", runs=2)]
        pitching = [pitching_row(game_id="g1", r=1), pitching_row(game_id="g9", r=10)]
        games = derive_games(batting, pitching)
        assert len(games) == 1
        assert games.loc[0, "runs_allowed"] == 1

    def test_game_without_pitching_rows(self, batting_row):
        games = derive_games([batting_row(game_id="g1", runs=1)], [])
        assert games.loc[0, "runs_allowed"] == 0
        assert games.loc[0, "result"] == "W"

    def test_tie(self, batting_row, pitching_row):
        games = derive_games([batting_row(runs=2)], [pitching_row(r=2)])
        assert games.loc[0, "result"] == "T"
        assert games.loc[0, "win_pct"] == 0.0

    def test_blank_game_id_is_skipped(self, batting_row):
        games = derive_games([batting_row(game_id="", runs=9), batting_row(game_id="g1", runs=1)], [])
        assert list(games["game_id"]) == ["g1"]
        assert games.loc[0, "runs_scored"] == 1

    def test_unknown_opponent(self, batting_row):
        games = derive_games([batting_row(home_team="Ants", away_team="")], [], home_team_aliases=("Ants",))
        assert games.loc[0, "opponent"] == "unknown"

    def test_empty(self):
        games = derive_games([], [])
        assert games.empty
        assert list(games.columns) == GAME_COLUMNS

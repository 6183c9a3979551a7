"""Tests for player aggregation and team totals."""

import numpy as np
import pytest

from scorebook.aggregation import (
    BATTING_SUMMARY_COLUMNS,
    PITCHING_SUMMARY_COLUMNS,
    aggregate_batting,
    aggregate_pitching,
    list_categories,
    list_players,
    team_totals,
)


class TestAggregateBatting:
    """Tests for aggregate_batting()."""

    def test_rate_formulas(self, batting_row):
        rows = [
            batting_row(game_id="g1", ab=6, h=2, doubles=1, bb=1, so=2, sf=1),
            batting_row(game_id="g2", ab=4, h=2, hr=1, bb=1, hbp=1, so=1),
        ]
        s = aggregate_batting(rows).iloc[0]
        assert s["games"] == 2
        assert s["ab"] == 10
        assert s["avg"] == 0.4
        assert s["obp"] == 0.5  # (4 + 2 + 1) / (10 + 2 + 1 + 1)
        assert s["singles"] == 2
        assert s["total_bases"] == 8
        assert s["slg"] == 0.8
        assert s["ops"] == pytest.approx(1.3)
        assert s["bb_k"] == 1.0
        assert s["iso_d"] == pytest.approx(0.1)

    def test_rounding(self, batting_row):
        s = aggregate_batting([batting_row(ab=3, h=1, so=3, bb=1)]).iloc[0]
        assert s["avg"] == 0.333
        assert s["bb_k"] == 0.33

    def test_ops_is_rounded_sum_of_obp_and_slg(self, batting_row):
        rows = [
            batting_row(player_id="a", ab=7, h=3, doubles=1, bb=2, sf=1),
            batting_row(player_id="b", ab=9, h=2, triples=1, hbp=1),
            batting_row(player_id="c", ab=11, h=5, hr=2, bb=3, hbp=2, sf=2),
            batting_row(player_id="d", ab=0, bb=2),
        ]
        summary = aggregate_batting(rows)
        for _, s in summary.iterrows():
            assert s["ops"] == np.round(s["obp"] + s["slg"], 3)

    def test_zero_at_bats_gives_zero_rates(self, batting_row):
        s = aggregate_batting([batting_row(ab=0, h=0)]).iloc[0]
        assert s["avg"] == 0
        assert s["slg"] == 0
        assert s["bb_k"] == 0
        assert not summary_has_nan(s)

    def test_same_id_different_names_is_one_player(self, batting_row):
        rows = [
            batting_row(player_id="p7", name="Suzuki", ab=3, h=1),
            batting_row(player_id="p7", name="Suzuki I.", ab=4, h=2),
        ]
        summary = aggregate_batting(rows)
        assert len(summary) == 1
        assert summary.loc[0, "player_key"] == "p7"
        assert summary.loc[0, "name"] == "Suzuki"
        assert summary.loc[0, "h"] == 3

    def test_missing_id_groups_by_name(self, batting_row):
        rows = [batting_row(player_id="", name="Guest", ab=2), batting_row(player_id="", name="Guest", ab=3)]
        summary = aggregate_batting(rows)
        assert summary.loc[0, "player_key"] == "Guest"
        assert summary.loc[0, "ab"] == 5

    def test_sorted_by_average_descending(self, batting_row):
        rows = [
            batting_row(player_id="low", ab=10, h=1),
            batting_row(player_id="high", ab=10, h=5),
            batting_row(player_id="mid", ab=10, h=3),
        ]
        assert list(aggregate_batting(rows)["player_key"]) == ["high", "mid", "low"]

    def test_counting_stats_stay_integral(self, batting_row):
        summary = aggregate_batting([batting_row(ab="4", h="2")])
        assert summary.loc[0, "ab"] == 4
        assert float(summary.loc[0, "ab"]).is_integer()

    def test_empty_input(self):
        summary = aggregate_batting([])
        assert summary.empty
        assert list(summary.columns) == BATTING_SUMMARY_COLUMNS


def summary_has_nan(row):
    return any(isinstance(v, float) and np.isnan(v) for v in row.values)


class TestAggregatePitching:
    """Tests for aggregate_pitching()."""

    def test_era_on_seven_inning_scale(self, pitching_row):
        s = aggregate_pitching([pitching_row(er=7, outs=9)]).iloc[0]
        assert s["era"] == 16.33

    def test_no_earned_runs(self, pitching_row):
        s = aggregate_pitching([pitching_row(er=0, outs=5)]).iloc[0]
        assert s["era"] == 0

    def test_innings_display_and_value(self, pitching_row):
        rows = [pitching_row(game_id="g1", outs=10), pitching_row(game_id="g2", outs=7)]
        s = aggregate_pitching(rows).iloc[0]
        assert s["outs"] == 17
        assert s["display_innings"] == "5.2"
        assert s["innings_val"] == pytest.approx(17 / 3)

    def test_whip_and_kbb(self, pitching_row):
        s = aggregate_pitching([pitching_row(outs=18, h=5, bb=2, hbp=1, so=8)]).iloc[0]
        assert s["whip"] == 1.33
        assert s["kbb"] == 4.0

    def test_zero_outs_and_walks(self, pitching_row):
        s = aggregate_pitching([pitching_row(outs=0, er=3, bb=0, so=2)]).iloc[0]
        assert s["era"] == 0
        assert s["whip"] == 0
        assert s["kbb"] == 0
        assert s["display_innings"] == "0"

    def test_sorted_by_era_ascending(self, pitching_row):
        rows = [
            pitching_row(player_id="bad", outs=21, er=6),
            pitching_row(player_id="good", outs=21, er=1),
        ]
        assert list(aggregate_pitching(rows)["player_key"]) == ["good", "bad"]

    def test_empty_input(self):
        summary = aggregate_pitching(None)
        assert summary.empty
        assert list(summary.columns) == PITCHING_SUMMARY_COLUMNS


class TestTeamTotals:
    """Tests for team_totals()."""

    def test_totals(self, batting_row, pitching_row):
        batting = [
            batting_row(game_id="g1", ab=4, h=2, runs=3, hr=1),
            batting_row(game_id="g1", player_id="p2", ab=4, h=1, runs=1),
            batting_row(game_id="g2", ab=2, h=0),
        ]
        pitching = [pitching_row(game_id="g1", outs=21, er=3)]
        totals = team_totals(batting, pitching)
        assert totals.games == 2
        assert totals.avg == 0.3
        assert totals.runs == 4
        assert totals.hr == 1
        assert totals.era == 3.0

    def test_no_batting_rows(self, pitching_row):
        assert team_totals([], [pitching_row()]) is None


class TestCatalogues:
    """Tests for list_categories() and list_players()."""

    def test_categories_sorted_and_distinct(self, batting_row):
        rows = [batting_row(title="Summer Cup"), batting_row(title=""), batting_row(title="Spring League"),
                batting_row(title="Summer Cup")]
        assert list_categories(rows) == ["Spring League", "Summer Cup"]

    def test_players_ordered_by_jersey(self, batting_row, pitching_row):
        batting = [
            batting_row(player_id="a", name="Ace", number="10"),
            batting_row(player_id="b", name="Bee", number="2"),
            batting_row(player_id="c", name="Cee", number="coach"),
        ]
        pitching = [pitching_row(player_id="d", name="Dee", number="18"), pitching_row(player_id="a", number="10")]
        players = list_players(batting, pitching)
        assert list(players["player_key"]) == ["b", "a", "d", "c"]

    def test_jersey_zero_sorts_as_zero(self, batting_row):
        rows = [batting_row(player_id="a", number="3"), batting_row(player_id="b", number="0")]
        assert list(list_players(rows, [])["player_key"]) == ["b", "a"]

"""
Tests for report output formats.

Run with: pytest tests/test_reporting.py -v
"""

import pytest

from match_stats.filtering import StatisticsFilter
from match_stats.ingest import read_analysis_string
from match_stats.player_stats import PlayerStatistics
from match_stats.reporting import (
    STATS_COLUMNS_HEADER,
    STATS_FRAME_COLUMNS,
    annotate_game,
    annotation_stats,
    curve_data,
    format_details,
    format_game,
    result_values,
    stats_frame,
    stats_header,
    summarize_players,
)


@pytest.fixture
def games(sample_xml):
    return read_analysis_string(sample_xml)


# =============================================================================
# Tests for text formats
# =============================================================================

class TestGameText:
    """Tests for PGN and details output."""

    def test_stats_header(self):
        assert stats_header(StatisticsFilter()) == [
            "# --AEthreshold 0.0 --minlength 10 --CVthreshold 0.0 ",
            STATS_COLUMNS_HEADER,
        ]

    def test_format_game(self, games):
        assert format_game(games[1]) == (
            '[White "Carol"]\n'
            '[Black "Dave"]\n'
            '[Result "0-1"]\n'
            "d4 d5 c4 0-1"
        )

    def test_format_game_escapes_quotes(self, make_game):
        game = make_game(tags={"Event": 'The "Big" One'})
        assert '[Event "The \\"Big\\" One"]\n' in format_game(game)

    def test_format_game_keeps_document_tag_order(self):
        text = """<gamelist><game>
            <tags>
              <tag name="ECO" value="C60"/>
              <tag name="Event" value="Open"/>
              <tag name="Time Control" value="40/7200"/>
              <tag name="Result" value="1-0"/>
            </tags>
            <moves>1 e4 1-0</moves>
            <analysis bookDepth="1"/>
        </game></gamelist>"""
        game = read_analysis_string(text)[0]
        assert format_game(game) == (
            '[ECO "C60"]\n'
            '[Event "Open"]\n'
            '[Time Control "40/7200"]\n'
            '[Result "1-0"]\n'
            "e4 1-0"
        )

    def test_format_details(self, games):
        assert format_details(games[1]) == (
            "d7d5\n"
            "  d7d5  -10\n"
            "\n"
            "c2c4\n"
            "  c2c4  mate 4\n"
            "\n"
        )


# =============================================================================
# Tests for annotation
# =============================================================================

class TestAnnotation:
    """Tests for annotated game output."""

    def test_annotation_stats(self, games):
        assert annotation_stats(games[0], True) == "Alice: AE = -2.50, CV = 0.50, NM = 2"
        assert annotation_stats(games[0], False) == "Bob: AE = -4.00, CV = 0.50, NM = 2"

    def test_annotation_stats_without_scores(self, make_game):
        assert annotation_stats(make_game(), True) == "Alice: AE = n/a, CV = n/a, NM = 0"

    def test_annotate_game(self, games):
        text = annotate_game(games[0])
        assert text.startswith('[Event "Club Championship"]\n')
        body = text.split("\n\n", 1)[1]
        assert body == (
            "{ search depth = 20 /\n"
            "Alice: AE = -2.50, CV = 0.50, NM = 2 /\n"
            "Bob: AE = -4.00, CV = 0.50, NM = 2 }\n"
            "\n"
            "e4 e5 \n"
            "g1f3 { 34 } "
            "b8c6 { -28 } ( g8f6 { -20 }) "
            "f1b5 { 35 } ( f1c4 { 40 }) "
            "a7a6 { -30 } "
            "1-0\n"
        )

    def test_annotate_move_missing_from_evaluations(self, make_move, make_game):
        game = make_game([make_move("d2d4", True, ("e2e4", "30"))], book_depth=0)
        assert "d2d4 ( e2e4 { 30 }) 1-0\n" in annotate_game(game)


# =============================================================================
# Tests for curve data
# =============================================================================

class TestCurveData:
    """Tests for best evaluations paired with results."""

    @pytest.mark.parametrize("result,expected", [
        ("1-0", (1, -1)),
        ("0-1", (-1, 1)),
        ("1/2-1/2", (0, 0)),
        ("*", None),
        ("", None),
    ])
    def test_result_values(self, result, expected):
        assert result_values(result) == expected

    def test_white_win(self, games):
        assert curve_data(games[0]) == [
            "# Game",
            "# HashCode 1a2b",
            "34 1",
            "-20 -1",
            "40 1",
            "-30 -1",
        ]

    def test_black_win_without_hash_code(self, games):
        assert curve_data(games[1]) == ["# Game", "# HashCode ", "-10 -1", "mate 4 1"]

    def test_unfinished_game(self, make_move, make_game):
        game = make_game([make_move("e2e4", True, ("e2e4", "30"))], tags={"Result": "*"})
        assert curve_data(game) == []


# =============================================================================
# Tests for pandas summaries
# =============================================================================

class TestSummaries:
    """Tests for per-player summaries."""

    @pytest.fixture
    def stats(self, scored_game):
        first = scored_game(white_losses=[0] * 4, black_losses=[0, 0, 10, 10])
        second = scored_game(
            white_losses=[10] * 4, black_losses=[0] * 4, tags={"Black": "Carol"},
        )
        return [
            PlayerStatistics.for_side(game, is_white)
            for game in (first, second)
            for is_white in (True, False)
        ]

    def test_stats_frame(self, stats):
        frame = stats_frame(stats)
        assert list(frame.columns) == STATS_FRAME_COLUMNS
        assert len(frame) == 4
        assert list(frame["player"]) == ["Alice", "Bob", "Alice", "Carol"]

    def test_stats_frame_skips_empty_sides(self, make_game):
        stats = [PlayerStatistics.for_side(make_game(), True)]
        frame = stats_frame(stats)
        assert frame.empty
        assert list(frame.columns) == STATS_FRAME_COLUMNS

    def test_summarize_players(self, stats):
        summary = summarize_players(stats)
        assert summary.index[0] == "Carol"
        alice = summary.loc["Alice"]
        assert alice["games"] == 2
        assert alice["moves"] == 8
        assert alice["mean_ae"] == pytest.approx(-5.0)
        assert alice["mean_cv"] == pytest.approx(0.5)

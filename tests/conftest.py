"""
Pytest configuration for match statistics tests.
"""

import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from match_stats import AnalysedGame, Evaluation, GameRecord, PlayedMove


DEFAULT_TAGS = {
    "Event": "Club Championship",
    "Date": "2019.05.01",
    "White": "Alice",
    "Black": "Bob",
    "Result": "1-0",
    "HashCode": "1a2b",
    "BookDepth": "4",
}


# Two-game analysis document: the second game uses the legacy format with
# no player attribute on its moves.
SAMPLE_XML = """<?xml version="1.0" encoding="UTF-8"?>
<gamelist>
  <game>
    <tags>
      <tag name="Event" value="Club Championship"/>
      <tag name="Date" value="2019.05.01"/>
      <tag name="White" value="Alice"/>
      <tag name="Black" value="Bob"/>
      <tag name="Result" value="1-0"/>
      <tag name="HashCode" value="1a2b"/>
    </tags>
    <moves>6 e4 e5 Nf3 Nc6 Bb5 a6 1-0</moves>
    <analysis engine="Stockfish 8" bookDepth="2" searchDepth="20">
      <move player="white">
        <played>g1f3</played>
        <evaluation move="g1f3" value="34"/>
        <evaluation move="d2d4" value="30"/>
      </move>
      <move player="black">
        <played>b8c6</played>
        <evaluation move="g8f6" value="-20"/>
        <evaluation move="b8c6" value="-28"/>
      </move>
      <move player="white">
        <played>f1b5</played>
        <evaluation move="f1c4" value="40"/>
        <evaluation move="f1b5" value="35"/>
      </move>
      <move player="black">
        <played>a7a6</played>
        <evaluation move="a7a6" value="-30"/>
      </move>
    </analysis>
  </game>
  <game>
    <tags>
      <tag name="White" value="Carol"/>
      <tag name="Black" value="Dave"/>
      <tag name="Result" value="0-1"/>
    </tags>
    <moves>3 d4 d5 c4 0-1</moves>
    <analysis bookDepth="1">
      <move>
        <played>d7d5</played>
        <evaluation move="d7d5" value="-10"/>
      </move>
      <move>
        <played>c2c4</played>
        <evaluation move="c2c4" value="mate 4"/>
      </move>
    </analysis>
  </game>
</gamelist>
"""


@pytest.fixture
def make_move():
    """Factory for played moves: make_move("e2e4", True, ("e2e4", "34"), ...)."""
    def _make_move(coordinate: str, is_white: bool, *evaluations: tuple[str, str]) -> PlayedMove:
        return PlayedMove(
            coordinate,
            is_white,
            tuple(Evaluation(move, value) for move, value in evaluations),
        )
    return _make_move


@pytest.fixture
def make_game():
    """Factory for game records built from analysed moves."""
    def _make_game(
        moves=(),
        book_depth: int = 4,
        tags: dict = None,
        move_text: str = None,
        search_depth: str = "20",
    ) -> GameRecord:
        game_tags = dict(DEFAULT_TAGS)
        if tags:
            game_tags.update(tags)
        if move_text is None:
            move_text = "0 " + " ".join(["e4"] * (max(book_depth, 0) + len(moves))) + " 1-0"
        analysis = AnalysedGame(
            analysed_moves=tuple(moves),
            book_depth=book_depth,
            search_depth=search_depth,
            engine_id="Stockfish 8",
        )
        return GameRecord.from_move_text(game_tags, move_text, analysis)
    return _make_game


@pytest.fixture
def scored_game(make_move, make_game):
    """
    Factory for a game whose sides score the given centipawn losses.

    A loss of 0 is the best move; a loss of n is a move n centipawns worse.
    """
    def _scored_game(white_losses=(), black_losses=(), **kwargs) -> GameRecord:
        moves = []
        for index in range(max(len(white_losses), len(black_losses))):
            for is_white, losses in ((True, white_losses), (False, black_losses)):
                if index >= len(losses):
                    continue
                loss = losses[index]
                if loss == 0:
                    moves.append(make_move("e2e4", is_white, ("e2e4", "50"), ("d2d4", "40")))
                else:
                    moves.append(make_move(
                        "d2d4", is_white, ("e2e4", "50"), ("d2d4", str(50 - loss)),
                    ))
        return make_game(moves, **kwargs)
    return _scored_game


@pytest.fixture
def sample_xml() -> str:
    return SAMPLE_XML


@pytest.fixture
def sample_file(tmp_path) -> Path:
    path = tmp_path / "games.xml"
    path.write_text(SAMPLE_XML, encoding="utf-8")
    return path

"""
Scoring of played moves against the engine's candidate list.

For every analysed move the played move is located in the evaluation list
and compared with the first (best) entry:

- same move as the best: score 0
- both centipawn scores: played - best (centipawns worse, normally <= 0)
- both forced mates: 0 for the same mate length, otherwise the extra plies
- mate missed (best is mate, played is not): the played move's raw score
- mate found where the best was not: the best move's score

Mate-divergent scores cannot be placed on the centipawn scale, so they are
left out of the numeric sequence and shown as "?" in the textual one.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import chess

from .records import GameRecord, PlayedMove, move_prefix


logger = logging.getLogger(__name__)

MATE_PREFIX = "mate"

# Differences beyond this are reported at debug level
LARGE_DIFFERENCE = 1000

_INTEGER = re.compile(r"[+-]?\d+")

UNSCORED_TEXT = "?"


class ScoringError(ValueError):
    """A played move could not be scored against its evaluations."""


@dataclass(frozen=True)
class PlayedMoveScore:
    """
    The score of one played move relative to the engine's best move.

    The meaning of `value` depends on the two mate flags; see the module
    docstring.
    """
    value: int
    best_is_mate: bool = False
    played_is_mate: bool = False

    @property
    def is_comparable(self) -> bool:
        """True when the value belongs on the centipawn scale."""
        if not self.best_is_mate and not self.played_is_mate:
            return True
        return self.best_is_mate and self.played_is_mate and self.value == 0

    def as_text(self) -> str:
        return str(self.value) if self.is_comparable else UNSCORED_TEXT


@dataclass(frozen=True)
class Ok:
    score: PlayedMoveScore


@dataclass(frozen=True)
class Err:
    error: ScoringError


ScoreResult = Union[Ok, Err]


def parse_evaluation(raw_value: str) -> tuple[bool, int]:
    """
    Split an evaluation into (is_mate, number).

    Args:
        raw_value: "34", "-120" or "mate 3".

    Raises:
        ScoringError: If the numeric part is not an integer.
    """
    parts = raw_value.split()
    is_mate = len(parts) > 1 and parts[0] == MATE_PREFIX
    number = parts[1] if is_mate else (parts[0] if parts else "")
    if not _INTEGER.fullmatch(number):
        raise ScoringError(f"format error in evaluation {raw_value!r}")
    return is_mate, int(number)


def _combine(
    best_is_mate: bool,
    best_score: int,
    played_is_mate: bool,
    played_score: int,
) -> PlayedMoveScore:
    if best_is_mate and played_is_mate:
        if played_score == best_score:
            return PlayedMoveScore(0, True, True)
        return PlayedMoveScore(played_score - best_score, True, True)
    if best_is_mate:
        return PlayedMoveScore(played_score, True, False)
    if played_is_mate:
        return PlayedMoveScore(best_score, False, True)
    return PlayedMoveScore(played_score - best_score)


def resolve_move(played: PlayedMove) -> ScoreResult:
    """
    Score a played move against its evaluation list.

    Returns:
        Ok(PlayedMoveScore) on success; Err(ScoringError) when the list is
        empty, the played move is not listed after the best move, or an
        evaluation is malformed.
    """
    if not played.evaluations:
        return Err(ScoringError(f"no evaluations for move {played.move_coordinate}"))

    prefix = move_prefix(played.move_coordinate)
    best, *alternatives = played.evaluations
    if best.prefix == prefix:
        return Ok(PlayedMoveScore(0))

    try:
        best_is_mate, best_score = parse_evaluation(best.raw_value)
        for evaluation in alternatives:
            if evaluation.prefix != prefix:
                continue
            played_is_mate, played_score = parse_evaluation(evaluation.raw_value)
            score = _combine(best_is_mate, best_score, played_is_mate, played_score)
            if score.is_comparable and score.value > LARGE_DIFFERENCE:
                logger.debug("Large score difference for %s", evaluation)
            return Ok(score)
    except ScoringError as e:
        return Err(ScoringError(f"format error in {played.move_coordinate}: {e}"))

    listed = " ".join(evaluation.prefix for evaluation in played.evaluations)
    return Err(ScoringError(f"played move {prefix} not found in evaluations {listed}"))


@dataclass(frozen=True)
class SideScores:
    """Scores of one side of one game."""
    numeric: tuple[int, ...] = ()
    textual: tuple[str, ...] = ()
    error: Optional[ScoringError] = None


def score_side(game: GameRecord, is_white: bool) -> SideScores:
    """
    Score every analysed move of one side of a game.

    Nothing is scored when the game's book depth is unknown. If any move
    cannot be resolved, the whole side is discarded and a single warning
    naming the game is logged.
    """
    if game.book_depth < 0:
        return SideScores()

    numeric = []
    textual = []
    for move in game.analysis.moves_for(is_white):
        result = resolve_move(move)
        if isinstance(result, Err):
            side = chess.COLOR_NAMES[chess.WHITE if is_white else chess.BLACK]
            logger.warning("%s (%s) in %s", result.error, side, game.describe())
            return SideScores(error=result.error)
        score = result.score
        if score.is_comparable:
            numeric.append(score.value)
        textual.append(score.as_text())

    return SideScores(numeric=tuple(numeric), textual=tuple(textual))


# =============================================================================
# Player colour resolution
# =============================================================================

class SidePrecedence(Enum):
    """Which source decides a player's colour when both are available."""
    EXPLICIT = "explicit"  # the caller's colour wins
    TAGS = "tags"          # matching the White/Black tag value wins


def resolve_side(
    game: GameRecord,
    name: str,
    colour: Optional[chess.Color] = None,
    precedence: SidePrecedence = SidePrecedence.EXPLICIT,
) -> Optional[chess.Color]:
    """
    Decide which side a player had in a game.

    Args:
        game: The game.
        name: Player name, compared case-insensitively with the White and
            Black tags.
        colour: Colour given explicitly by the caller, if any.
        precedence: Which source wins when both give an answer.

    Returns:
        chess.WHITE, chess.BLACK, or None if neither source decides.
    """
    by_tag = None
    if name and name.casefold() == game.tag("White").casefold():
        by_tag = chess.WHITE
    elif name and name.casefold() == game.tag("Black").casefold():
        by_tag = chess.BLACK

    if precedence is SidePrecedence.EXPLICIT:
        return colour if colour is not None else by_tag
    return by_tag if by_tag is not None else colour

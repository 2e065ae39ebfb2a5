"""
Per-player, per-game statistics.

- Average Error (AE): mean score difference per scored move
- Standard deviation (SD): population standard deviation of the scores
- Coincidence Value (CV): fraction of scored moves at or above a low
  threshold, i.e. within that distance of the engine's best move

Scores are played-minus-best, so 0 is a perfect match and worse moves are
negative.
"""

import statistics
from dataclasses import dataclass
from typing import Optional, Sequence

import chess

from .records import GameRecord
from .scoring import SidePrecedence, resolve_side, score_side


# Player names are padded / truncated to this width in report lines
MAX_NAME_LENGTH = 30


class EmptySampleError(ValueError):
    """Statistics were requested for a player with no scored moves."""


def _require_scores(scores: Sequence[int]) -> None:
    if not scores:
        raise EmptySampleError("no scored moves")


def average_error(scores: Sequence[int]) -> float:
    _require_scores(scores)
    return statistics.fmean(scores)


def standard_deviation(scores: Sequence[int], mean: Optional[float] = None) -> float:
    _require_scores(scores)
    if mean is None:
        mean = average_error(scores)
    return statistics.pstdev(scores, mu=mean)


def coincidence_value(scores: Sequence[int], low_threshold: float) -> float:
    _require_scores(scores)
    within = sum(1 for score in scores if score >= low_threshold)
    return within / len(scores)


@dataclass(frozen=True)
class StatisticsSummary:
    ae: float
    sd: float
    cv: float


def compute_statistics(scores: Sequence[int], low_threshold: float) -> StatisticsSummary:
    """
    Compute AE, SD and CV for a score sequence.

    Raises:
        EmptySampleError: If `scores` is empty.
    """
    ae = average_error(scores)
    return StatisticsSummary(
        ae=ae,
        sd=standard_deviation(scores, ae),
        cv=coincidence_value(scores, low_threshold),
    )


def _year(date: str) -> str:
    return date[:4] if len(date) >= 4 else "????"


def _padded_name(name: str) -> str:
    return f"{name[:MAX_NAME_LENGTH]:<{MAX_NAME_LENGTH}}"


@dataclass(frozen=True)
class PlayerStatistics:
    """Statistics for one player in one game."""
    game: GameRecord
    player_name: str
    is_white: bool
    scores: tuple[int, ...]
    text_scores: tuple[str, ...]
    cv: Optional[float]  # None when there are no scores
    low_threshold: float = 0.0

    @classmethod
    def for_side(
        cls,
        game: GameRecord,
        is_white: bool,
        low_threshold: float = 0.0,
    ) -> "PlayerStatistics":
        side = score_side(game, is_white)
        cv = coincidence_value(side.numeric, low_threshold) if side.numeric else None
        return cls(
            game=game,
            player_name=game.player_name(is_white),
            is_white=is_white,
            scores=side.numeric,
            text_scores=side.textual,
            cv=cv,
            low_threshold=low_threshold,
        )

    @classmethod
    def for_player(
        cls,
        game: GameRecord,
        name: str,
        colour: Optional[chess.Color] = None,
        low_threshold: float = 0.0,
        precedence: SidePrecedence = SidePrecedence.EXPLICIT,
    ) -> Optional["PlayerStatistics"]:
        """
        Statistics for a player identified by name and/or colour.

        Returns None if the player's side in the game cannot be determined.
        """
        side = resolve_side(game, name, colour, precedence)
        if side is None:
            return None
        return cls.for_side(game, side == chess.WHITE, low_threshold)

    @property
    def num_scores(self) -> int:
        return len(self.scores)

    @property
    def has_scores(self) -> bool:
        return bool(self.scores)

    @property
    def ae(self) -> float:
        return average_error(self.scores)

    @property
    def sd(self) -> float:
        return standard_deviation(self.scores)

    @property
    def colour_code(self) -> str:
        return "W" if self.is_white else "B"

    def coincidence(self) -> float:
        """Return the CV, raising EmptySampleError when there are no scores."""
        if self.cv is None:
            raise EmptySampleError(f"no scored moves for {self.player_name}")
        return self.cv

    def build_id(self) -> str:
        """
        Identify this player in this game.

        Format: year:name:W|B:book depth tag:number of scored moves
        """
        return (
            f"{_year(self.game.tag('Date'))}:{_padded_name(self.player_name)}"
            f":{self.colour_code}:{self.game.tag('BookDepth'):>3}"
            f":{len(self.text_scores):3d}"
        )

    def format_line(self, show_full_scores: bool = False) -> str:
        """
        Format the report line for this player.

        Raises:
            EmptySampleError: If the player has no scored moves.
        """
        summary = compute_statistics(self.scores, self.low_threshold)
        analysis = self.game.analysis

        result = self.game.tag("Result")
        result = result[:3] if len(result) >= 3 else f"{result:>3}"
        hash_code = self.game.tag("HashCode").rjust(8, "0")

        # The move count is the textual count so unscored mates are included
        fields = [
            _year(self.game.tag("Date")),
            _padded_name(self.player_name),
            self.colour_code,
            f"{analysis.book_depth:>3}",
            f"{len(self.text_scores):3d}",
            f"{analysis.search_depth:>2}",
            f"{summary.ae:8.2f}",
            f"{summary.sd:6.1f}",
            f"{self.coincidence():5.2f}",
            result,
            hash_code,
        ]
        line = ":".join(fields) + ":"
        if show_full_scores:
            line += "".join(f"{score}:" for score in self.text_scores)
        return line

    def __str__(self) -> str:
        return self.format_line()

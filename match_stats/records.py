"""
In-memory records for analysed games.

The analyser pairs every move played after the opening book with the
engine's ranked candidate moves. These records hold that data exactly as
ingested; they are never mutated after construction.
"""

from dataclasses import dataclass, field
from typing import Mapping, Optional


# Moves are compared by their from/to squares only (promotion suffix ignored)
COORDINATE_LENGTH = 4

# Book depth value meaning "unknown"
UNKNOWN_BOOK_DEPTH = -1


def move_prefix(move: str) -> str:
    """Return the from/to square part of a coordinate move ("e7e8q" -> "e7e8")."""
    return move[:COORDINATE_LENGTH]


@dataclass(frozen=True)
class Evaluation:
    """One engine candidate move and its raw evaluation text."""
    move_coordinate: str
    raw_value: str  # centipawns ("34", "-120") or "mate N"

    @property
    def prefix(self) -> str:
        return move_prefix(self.move_coordinate)

    def __str__(self) -> str:
        return f"{self.move_coordinate}  {self.raw_value}"


@dataclass(frozen=True)
class PlayedMove:
    """
    A move from the game and the engine's evaluations for its position.

    The first evaluation is the engine's best move.
    """
    move_coordinate: str
    is_white_move: bool
    evaluations: tuple[Evaluation, ...] = ()

    @property
    def best(self) -> Optional[Evaluation]:
        return self.evaluations[0] if self.evaluations else None

    def evaluation_for_move(self) -> Optional[Evaluation]:
        """Return the evaluation listed for exactly the move played, if any."""
        for evaluation in self.evaluations:
            if evaluation.move_coordinate == self.move_coordinate:
                return evaluation
        return None

    def __str__(self) -> str:
        lines = [self.move_coordinate]
        lines.extend(f"  {evaluation}" for evaluation in self.evaluations)
        return "\n".join(lines) + "\n"


@dataclass(frozen=True)
class AnalysedGame:
    """The analysed (post-book) moves of a game and how they were searched."""
    analysed_moves: tuple[PlayedMove, ...] = ()
    book_depth: int = UNKNOWN_BOOK_DEPTH
    search_depth: str = ""
    engine_id: str = "unknown"

    def __post_init__(self):
        if self.book_depth < 0:
            object.__setattr__(self, "book_depth", UNKNOWN_BOOK_DEPTH)

    def moves_for(self, is_white: bool) -> list[PlayedMove]:
        """Return the analysed moves made by one side, in ply order."""
        return [move for move in self.analysed_moves if move.is_white_move == is_white]

    def __str__(self) -> str:
        return "".join(f"{move}\n" for move in self.analysed_moves)


def parse_book_depth(text: Optional[str]) -> int:
    """
    Parse a book depth attribute.

    Missing or negative values map to UNKNOWN_BOOK_DEPTH.

    Raises:
        ValueError: If the text is present but not an integer.
    """
    if text is None or not text.strip():
        return UNKNOWN_BOOK_DEPTH
    depth = int(text.strip())
    return depth if depth >= 0 else UNKNOWN_BOOK_DEPTH


@dataclass(frozen=True)
class GameRecord:
    """
    A game's PGN tags, its move tokens and the engine analysis.

    `moves` holds book and analysed moves; the leading count token and the
    trailing result token of the source move text are not included.
    """
    tags: dict[str, str]  # in document order
    moves: tuple[str, ...]
    analysis: AnalysedGame = field(default_factory=AnalysedGame)

    @classmethod
    def from_move_text(
        cls,
        tags: Mapping[str, str],
        move_text: str,
        analysis: AnalysedGame,
    ) -> "GameRecord":
        """
        Build a record from a tag mapping and the raw move text.

        The first token of the move text (the move count) and the last token
        (the result) are discarded.
        """
        tokens = move_text.split()
        return cls(
            tags=dict(tags),
            moves=tuple(tokens[1:-1]),
            analysis=analysis,
        )

    @property
    def book_depth(self) -> int:
        return self.analysis.book_depth

    def tag(self, name: str) -> str:
        """Return a tag's value, or an empty string when the tag is not set."""
        return self.tags.get(name, "")

    def player_name(self, is_white: bool) -> str:
        return self.tag("White" if is_white else "Black")

    def book_moves(self) -> tuple[str, ...]:
        """Return the moves played before analysis started."""
        if self.book_depth <= 0:
            return ()
        return self.moves[:self.book_depth]

    def describe(self) -> str:
        """Short one-line identification of the game for messages."""
        description = f"{self.tag('White') or '?'} - {self.tag('Black') or '?'}"
        date = self.tag("Date")
        if date:
            description += f" ({date})"
        hash_code = self.tag("HashCode")
        if hash_code:
            description += f" [HashCode {hash_code}]"
        return description

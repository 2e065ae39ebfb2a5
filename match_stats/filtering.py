"""
Selection of player statistics for reporting.

A side of a game is a candidate when its player, its player ID or the
game's hash code is on one of the configured lists. A candidate is reported
when its statistics pass the score criteria:

1. fewer scored moves than `min_length`: never reported
2. `show_accuracy`: always reported
3. no CV threshold: reported if no AE threshold is set, else if AE >= threshold
4. CV threshold set: reported if CV >= threshold
5. otherwise, with a random threshold, reported with that probability
"""

import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .player_stats import PlayerStatistics
from .records import GameRecord


DEFAULT_MIN_LENGTH = 10


class PlayerWildcard(Enum):
    """Player patterns that match by colour rather than by name."""
    ANY_WHITE = "<White>"
    ANY_BLACK = "<Black>"
    ANY = "<WhiteOrBlack>"


@dataclass(frozen=True)
class ExactName:
    name: str


PlayerQuery = Union[ExactName, PlayerWildcard]


def parse_player_query(text: str) -> PlayerQuery:
    """Parse a player pattern; wildcards are recognised case-insensitively."""
    for wildcard in PlayerWildcard:
        if text.casefold() == wildcard.value.casefold():
            return wildcard
    return ExactName(text)


def query_matches(query: PlayerQuery, name: str, is_white: bool) -> bool:
    if query is PlayerWildcard.ANY:
        return True
    if query is PlayerWildcard.ANY_WHITE:
        return is_white
    if query is PlayerWildcard.ANY_BLACK:
        return not is_white
    return query.name.casefold() == name.casefold()


class FilterConfigError(ValueError):
    """Invalid statistics filter configuration."""


def _read_list_file(path: Path) -> list[str]:
    with open(path, encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip()]


@dataclass
class StatisticsFilter:
    """
    Match configuration, built once before any game is scored.

    `rng` drives the random sampling fallback; pass a seeded
    `random.Random` for reproducible selections.
    """
    players: list[PlayerQuery] = field(default_factory=list)
    ids: list[str] = field(default_factory=list)
    hash_codes: set[str] = field(default_factory=set)
    min_length: int = DEFAULT_MIN_LENGTH
    ae_threshold: Optional[float] = None
    cv_threshold: float = 0.0
    show_accuracy: bool = False
    show_full_scores: bool = False
    random_threshold: float = 0.0
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self):
        if self.random_threshold != 0:
            self.set_random_threshold(self.random_threshold)
        if self.min_length < 0:
            raise FilterConfigError(f"Invalid minimum length: {self.min_length}")

    # -------------------------------------------------------------------------
    # Configuration
    # -------------------------------------------------------------------------

    def add_player(self, player: Union[str, PlayerQuery]) -> None:
        if isinstance(player, str):
            player = parse_player_query(player)
        self.players.append(player)

    def add_id(self, player_id: str) -> None:
        self.ids.append(player_id)

    def add_hash_code(self, hash_code: str) -> None:
        self.hash_codes.add(hash_code)

    def load_ids(self, path: Path) -> None:
        """Add IDs from a file, one per line."""
        for player_id in _read_list_file(path):
            self.add_id(player_id)

    def load_hash_codes(self, path: Path) -> None:
        """Add hash codes from a file, one per line."""
        for hash_code in _read_list_file(path):
            self.add_hash_code(hash_code)

    def set_random_threshold(self, threshold: float) -> None:
        if not 0 < threshold <= 1.0:
            raise FilterConfigError(f"Invalid random threshold: {threshold}")
        self.random_threshold = threshold

    @property
    def low_threshold(self) -> float:
        """Low threshold used for CV: the AE threshold if set, else 0."""
        return self.ae_threshold if self.ae_threshold is not None else 0.0

    @property
    def has_selection(self) -> bool:
        return bool(self.players or self.ids or self.hash_codes)

    def configuration(self) -> str:
        """Describe the score settings as command-line flags."""
        config = "--accuracy " if self.show_accuracy else ""
        config += f"--AEthreshold {self.low_threshold} "
        config += f"--minlength {self.min_length} "
        config += f"--CVthreshold {self.cv_threshold} "
        return config

    # -------------------------------------------------------------------------
    # Membership predicates
    # -------------------------------------------------------------------------

    def player_matches(self, name: str, is_white: bool) -> bool:
        return any(query_matches(query, name, is_white) for query in self.players)

    def id_matches(self, stats: PlayerStatistics) -> bool:
        return bool(self.ids) and stats.build_id() in self.ids

    def hash_code_matches(self, hash_code: str) -> bool:
        return bool(hash_code) and hash_code in self.hash_codes

    # -------------------------------------------------------------------------
    # Score criteria
    # -------------------------------------------------------------------------

    def matches(self, stats: PlayerStatistics, sample_size: Optional[int] = None) -> bool:
        """
        Decide whether statistics pass the score criteria.

        Args:
            stats: The player's statistics.
            sample_size: Number of scored moves; defaults to stats.num_scores.

        Raises:
            EmptySampleError: If AE or CV is needed but there are no scores.
        """
        if sample_size is None:
            sample_size = stats.num_scores
        if sample_size < self.min_length:
            return False
        if self.show_accuracy:
            return True

        if self.cv_threshold == 0:
            accepted = self.ae_threshold is None or stats.ae >= self.ae_threshold
        else:
            accepted = stats.coincidence() >= self.cv_threshold

        if not accepted and self.random_threshold > 0:
            accepted = self.rng.random() <= self.random_threshold
        return accepted

    def select_stats(self, game: GameRecord) -> list[PlayerStatistics]:
        """
        Return the statistics to report for a game, white first.

        Sides without scored moves are never reported.
        """
        selected = []
        hash_code = game.tag("HashCode")
        for is_white in (True, False):
            stats = PlayerStatistics.for_side(game, is_white, self.low_threshold)
            candidate = (
                self.player_matches(stats.player_name, is_white)
                or self.id_matches(stats)
                or self.hash_code_matches(hash_code)
            )
            if candidate and stats.has_scores and self.matches(stats):
                selected.append(stats)
        return selected

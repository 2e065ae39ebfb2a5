"""
Output formats for scored games.

- Statistics header and lines (one line per accepted player)
- Matching games as PGN text
- Details: every analysed move with its evaluations
- Annotated games: book moves, then each analysed move with its evaluation
  and the engine's preferred alternative
- Curve data: best evaluation per move paired with the game result
- pandas summaries across many games
"""

from typing import Iterable, Optional

import chess
import pandas as pd

from .filtering import StatisticsFilter
from .player_stats import PlayerStatistics
from .records import GameRecord


STATS_COLUMNS_HEADER = "# Date:Player:W/B:BD:EM:Depth:AE:sd:CV:Res:Hash:"

# Result tag prefix -> (white value, black value)
RESULT_VALUES = {
    "1-0": (1, -1),
    "0-1": (-1, 1),
    "1/2": (0, 0),
}


def stats_header(stats_filter: StatisticsFilter) -> list[str]:
    """Return the comment lines written before any statistics lines."""
    return [f"# {stats_filter.configuration()}", STATS_COLUMNS_HEADER]


def _escape_tag_value(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_tags(game: GameRecord) -> str:
    return "".join(
        f'[{name} "{_escape_tag_value(value)}"]\n'
        for name, value in game.tags.items()
    )


def format_game(game: GameRecord) -> str:
    """Render a game's tags, moves and result as PGN text."""
    moves = "".join(f"{move} " for move in game.moves)
    return format_tags(game) + moves + game.tag("Result")


def format_details(game: GameRecord) -> str:
    """Every analysed move followed by its indented evaluations."""
    return str(game.analysis)


# =============================================================================
# Annotation
# =============================================================================

def annotation_stats(game: GameRecord, is_white: bool) -> str:
    """One side's AE, CV and number of scored moves for an annotation header."""
    name = game.player_name(is_white)
    colour = chess.WHITE if is_white else chess.BLACK
    stats = PlayerStatistics.for_player(game, name, colour)
    if stats is None or not stats.has_scores:
        return f"{name}: AE = n/a, CV = n/a, NM = 0"
    return (
        f"{name}: AE = {stats.ae:.2f}, CV = {stats.coincidence():.2f}, "
        f"NM = {stats.num_scores}"
    )


def annotate_game(game: GameRecord) -> str:
    """
    Render a game with evaluation annotations.

    Each analysed move is followed by the evaluation listed for it and, when
    the engine preferred another move, that move and its evaluation in
    parentheses.
    """
    parts = [format_tags(game), "\n"]
    parts.append(f"{{ search depth = {game.analysis.search_depth} /\n")
    parts.append(f"{annotation_stats(game, True)} /\n")
    parts.append(f"{annotation_stats(game, False)} }}\n")
    parts.append("\n")

    parts.extend(f"{move} " for move in game.book_moves())
    parts.append("\n")

    for played in game.analysis.analysed_moves:
        parts.append(f"{played.move_coordinate} ")
        evaluation = played.evaluation_for_move()
        if evaluation is not None:
            parts.append(f"{{ {evaluation.raw_value} }} ")
        best = played.best
        if best is not None and best is not evaluation:
            parts.append(f"( {best.move_coordinate} {{ {best.raw_value} }}) ")
    parts.append(game.tag("Result"))
    parts.append("\n")
    return "".join(parts)


# =============================================================================
# Curve data
# =============================================================================

def result_values(result: str) -> Optional[tuple[int, int]]:
    """Map a result tag to (white, black) values, or None if undecided."""
    result = result.strip()
    for prefix, values in RESULT_VALUES.items():
        if result.startswith(prefix):
            return values
    return None


def curve_data(game: GameRecord) -> list[str]:
    """
    Pair each analysed position's best evaluation with the final result.

    The result is given from the mover's perspective: 1 win, 0 draw, -1 loss.
    Games without a known result produce no lines.
    """
    values = result_values(game.tag("Result"))
    if values is None:
        return []
    lines = ["# Game"]
    lines.append(f"# HashCode {game.tag('HashCode')}")
    for played in game.analysis.analysed_moves:
        if played.best is None:
            continue
        value = values[0] if played.is_white_move else values[1]
        lines.append(f"{played.best.raw_value} {value}")
    return lines


# =============================================================================
# Summaries
# =============================================================================

STATS_FRAME_COLUMNS = [
    "player", "colour", "date", "book_depth", "moves", "search_depth",
    "ae", "sd", "cv", "result", "hash_code",
]


def stats_frame(stats: Iterable[PlayerStatistics]) -> pd.DataFrame:
    """One row per (game, player) with scored moves."""
    rows = []
    for s in stats:
        if not s.has_scores:
            continue
        rows.append({
            "player": s.player_name,
            "colour": s.colour_code,
            "date": s.game.tag("Date"),
            "book_depth": s.game.book_depth,
            "moves": s.num_scores,
            "search_depth": s.game.analysis.search_depth,
            "ae": s.ae,
            "sd": s.sd,
            "cv": s.coincidence(),
            "result": s.game.tag("Result"),
            "hash_code": s.game.tag("HashCode"),
        })
    return pd.DataFrame(rows, columns=STATS_FRAME_COLUMNS)


def summarize_players(stats: Iterable[PlayerStatistics]) -> pd.DataFrame:
    """
    Aggregate per-game statistics by player.

    Returns:
        DataFrame indexed by player with games, total moves and mean AE,
        SD and CV, sorted by mean CV (highest first).
    """
    frame = stats_frame(stats)
    summary = frame.groupby("player").agg(
        games=("ae", "size"),
        moves=("moves", "sum"),
        mean_ae=("ae", "mean"),
        mean_sd=("sd", "mean"),
        mean_cv=("cv", "mean"),
    )
    return summary.sort_values("mean_cv", ascending=False)

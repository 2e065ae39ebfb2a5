"""
Engine-coincidence statistics for analysed chess games.

Scores each move played against the engine's ranked candidates and reports
per-player Average Error (AE) and Coincidence Value (CV).
"""

from .records import (
    Evaluation,
    PlayedMove,
    AnalysedGame,
    GameRecord,
    UNKNOWN_BOOK_DEPTH,
    move_prefix,
    parse_book_depth,
)

from .scoring import (
    # Move scoring
    PlayedMoveScore,
    ScoringError,
    Ok,
    Err,
    ScoreResult,
    parse_evaluation,
    resolve_move,
    # Game scoring
    SideScores,
    score_side,
    SidePrecedence,
    resolve_side,
)

from .player_stats import (
    EmptySampleError,
    StatisticsSummary,
    PlayerStatistics,
    average_error,
    standard_deviation,
    coincidence_value,
    compute_statistics,
)

from .filtering import (
    DEFAULT_MIN_LENGTH,
    PlayerWildcard,
    ExactName,
    PlayerQuery,
    FilterConfigError,
    StatisticsFilter,
    parse_player_query,
    query_matches,
)

from .ingest import (
    IngestError,
    parse_analysis,
    parse_game,
    read_analysis_file,
    read_analysis_string,
)

from .reporting import (
    stats_header,
    format_game,
    format_details,
    annotate_game,
    curve_data,
    stats_frame,
    summarize_players,
)

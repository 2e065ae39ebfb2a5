#!/usr/bin/env python3
"""
Extract engine-coincidence statistics from analyser output files.

Prints one line per matching (game, player), or writes annotated games.

Usage:
    python scripts/extract_stats.py [OPTIONS] FILE [FILE ...]

Examples:
    python scripts/extract_stats.py games.xml
    python scripts/extract_stats.py --player "Carlsen, Magnus" --fullstats games.xml
    python scripts/extract_stats.py --CVthreshold 0.8 --AEthreshold -10 --matching games.xml
    python scripts/extract_stats.py --annotate annotated.txt games.xml
"""

import argparse
import logging
import sys
from contextlib import ExitStack
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from match_stats import (
    IngestError,
    PlayerWildcard,
    StatisticsFilter,
    annotate_game,
    curve_data,
    format_details,
    format_game,
    read_analysis_file,
    stats_header,
    summarize_players,
)
from match_stats import config


logger = logging.getLogger("extract_stats")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Report how closely played moves matched the engine's choices",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Player wildcards:
    <White>          any player of the white pieces
    <Black>          any player of the black pieces
    <WhiteOrBlack>   any player (the default when no selection is given)

Give --annotate without FILE after the analysis files, or before another option.
        """
    )
    parser.add_argument("files", nargs="+", type=Path, help="Analysis XML files")
    parser.add_argument("--AEthreshold", type=float, default=None, dest="ae_threshold",
                        help="Minimum average error to report")
    parser.add_argument("--CVthreshold", type=float, default=0.0, dest="cv_threshold",
                        help="Minimum coincidence value to report (default: off)")
    parser.add_argument("--accuracy", action="store_true",
                        help="Report every player with enough scored moves")
    parser.add_argument("--annotate", nargs="?", const=config.ANNOTATION_FILE, default=None,
                        type=Path, metavar="FILE",
                        help=f"Write annotated games to FILE (default: {config.ANNOTATION_FILE})")
    parser.add_argument("--append", action="store_true",
                        help="Append to output files instead of overwriting them")
    parser.add_argument("--curvedata", action="store_true",
                        help="Print best evaluations paired with game results")
    parser.add_argument("--details", action="store_true",
                        help=f"Write analysed moves of matching games to {config.DETAILS_FILE}")
    parser.add_argument("--fullstats", action="store_true",
                        help="Include every per-move score in the report lines")
    parser.add_argument("--hashfile", type=Path, help="File of game hash codes to match")
    parser.add_argument("--id", action="append", default=[], dest="ids",
                        help="Player ID to match (repeatable)")
    parser.add_argument("--idfile", type=Path, help="File of player IDs to match")
    parser.add_argument("--matching", action="store_true",
                        help=f"Write matching games to {config.MATCHING_FILE}")
    parser.add_argument("--minlength", type=int, default=config.MIN_LENGTH,
                        help=f"Minimum number of scored moves (default: {config.MIN_LENGTH})")
    parser.add_argument("--player", action="append", default=[], dest="players",
                        help="Player name or wildcard to match (repeatable)")
    parser.add_argument("--random", type=float, default=None, dest="random_threshold",
                        help="Probability of reporting a player that fails the thresholds")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for --random sampling")
    parser.add_argument("--stats", action="store_true",
                        help="Report statistics lines; accepted for compatibility, this is the default mode")
    parser.add_argument("--summary", type=Path, default=None,
                        help="Write a per-player CSV summary of reported lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    return parser


def build_filter(args: argparse.Namespace) -> StatisticsFilter:
    """
    Build the statistics filter from parsed arguments.

    Raises:
        FilterConfigError: On invalid threshold settings.
        OSError: If an ID or hash code file cannot be read.
    """
    stats_filter = StatisticsFilter(
        min_length=args.minlength,
        ae_threshold=args.ae_threshold,
        cv_threshold=args.cv_threshold,
        show_accuracy=args.accuracy,
        show_full_scores=args.fullstats,
        rng=config.make_rng(args.seed),
    )
    if args.random_threshold is not None:
        stats_filter.set_random_threshold(args.random_threshold)
    for player in args.players:
        stats_filter.add_player(player)
    for player_id in args.ids:
        stats_filter.add_id(player_id)
    if args.idfile:
        stats_filter.load_ids(args.idfile)
    if args.hashfile:
        stats_filter.load_hash_codes(args.hashfile)
    if not stats_filter.has_selection:
        stats_filter.add_player(PlayerWildcard.ANY)
    return stats_filter


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config.configure_logging(args.verbose)

    try:
        stats_filter = build_filter(args)
    except OSError as e:
        print(f"Error reading: {e.filename}", file=sys.stderr)
        return 2
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    mode = "a" if args.append else "w"
    reported = []

    with ExitStack() as stack:
        annotated_file = matching_file = details_file = None
        if args.annotate:
            annotated_file = stack.enter_context(open(args.annotate, mode, encoding="utf-8"))
        if args.details:
            details_file = stack.enter_context(open(config.DETAILS_FILE, mode, encoding="utf-8"))
        if args.matching:
            matching_file = stack.enter_context(open(config.MATCHING_FILE, mode, encoding="utf-8"))

        if not args.annotate:
            for line in stats_header(stats_filter):
                print(line)

        for path in args.files:
            try:
                games = read_analysis_file(path)
            except FileNotFoundError:
                print(f"File not found: {path}", file=sys.stderr)
                return 1
            except IngestError as e:
                print(f"Error processing: {path}: {e}", file=sys.stderr)
                continue

            for game in games:
                if annotated_file:
                    annotated_file.write(annotate_game(game))
                    annotated_file.write("\n")
                elif args.curvedata:
                    for line in curve_data(game):
                        print(line)
                    if matching_file and stats_filter.hash_code_matches(game.tag("HashCode")):
                        matching_file.write(format_game(game) + "\n")
                else:
                    for stats in stats_filter.select_stats(game):
                        print(stats.format_line(stats_filter.show_full_scores))
                        reported.append(stats)
                        if details_file:
                            details_file.write(format_details(game) + "\n")
                        if matching_file:
                            matching_file.write(format_game(game) + "\n")

    if args.summary:
        summarize_players(reported).to_csv(args.summary)
        logger.info("Wrote summary of %d lines to %s", len(reported), args.summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())

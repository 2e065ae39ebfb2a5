"""
Environment-driven defaults for the extraction runner.

Values are read from the process environment, after loading a `.env` file
if one is present. Command-line flags override them.
"""

import logging
import os
import random
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or not value.strip():
        return None
    return int(value)


MIN_LENGTH = int(os.getenv("MATCH_STATS_MIN_LENGTH", "10"))
ANNOTATION_FILE = os.getenv("MATCH_STATS_ANNOTATION_FILE", "annotated.txt")
MATCHING_FILE = os.getenv("MATCH_STATS_MATCHING_FILE", "matching.pgn")
DETAILS_FILE = os.getenv("MATCH_STATS_DETAILS_FILE", "details.txt")
RANDOM_SEED = _optional_int(os.getenv("MATCH_STATS_RANDOM_SEED"))
LOG_LEVEL = os.getenv("MATCH_STATS_LOG_LEVEL", "WARNING").upper()


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Random generator for sampling; seeded from the environment by default."""
    return random.Random(seed if seed is not None else RANDOM_SEED)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s: %(name)s: %(message)s")

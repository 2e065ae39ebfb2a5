"""
Reading of analyser output documents.

The analyser writes one XML document per batch of games:

    <gamelist>
      <game>
        <tags><tag name="White" value="..."/> ...</tags>
        <moves>N e4 e5 ... 1-0</moves>
        <analysis engine="..." bookDepth="8" searchDepth="20">
          <move player="white">
            <played>e2e4</played>
            <evaluation move="e2e4" value="34"/> ...
          </move>
        </analysis>
      </game>
    </gamelist>
"""

import logging
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Iterator, Optional

from .records import AnalysedGame, Evaluation, GameRecord, PlayedMove, parse_book_depth


logger = logging.getLogger(__name__)

# Move text used when a game has no <moves> content
MISSING_MOVES = "??"
# Played move text used when <played> has no single text child
MISSING_PLAYED = "???"


class IngestError(ValueError):
    """An analysis document could not be read."""


def _attribute(element: ET.Element, name: str, default: Optional[str] = None) -> Optional[str]:
    """Look up an attribute case-insensitively."""
    for key, value in element.attrib.items():
        if key.lower() == name.lower():
            return value
    return default


def _attribute_pair(element: ET.Element) -> Optional[tuple[str, str]]:
    """Return the values of a two-attribute element in attribute-name order."""
    if len(element.attrib) != 2:
        return None
    first, second = sorted(element.attrib)
    return element.attrib[first], element.attrib[second]


def _parse_tags(element: Optional[ET.Element]) -> dict[str, str]:
    tags = {}
    if element is None:
        return tags
    for tag in element.findall("tag"):
        pair = _attribute_pair(tag)
        if pair is not None:
            name, value = pair
            tags[name] = value
    return tags


def _parse_move(element: ET.Element, is_white: bool) -> Optional[PlayedMove]:
    played = None
    evaluations = []
    for child in element:
        if child.tag == "played":
            if len(child) == 0 and child.text is not None:
                played = child.text.strip()
            else:
                played = MISSING_PLAYED
        elif child.tag == "evaluation":
            pair = _attribute_pair(child)
            if pair is None:
                continue
            if played is None:
                logger.warning("No played move found for evaluation of %s", pair[0])
                continue
            evaluations.append(Evaluation(*pair))
    if played is None:
        return None
    return PlayedMove(played, is_white, tuple(evaluations))


def parse_analysis(element: ET.Element) -> AnalysedGame:
    """
    Build the analysis of one game from its <analysis> element.

    Raises:
        ValueError: If the bookDepth attribute is not an integer.
    """
    # Documents without a player attribute alternate, white first
    is_white = True
    moves = []
    for child in element.findall("move"):
        player = (_attribute(child, "player") or "").lower()
        if player == "white":
            is_white = True
        elif player == "black":
            is_white = False
        move = _parse_move(child, is_white)
        if move is not None:
            moves.append(move)
        is_white = not is_white

    return AnalysedGame(
        analysed_moves=tuple(moves),
        book_depth=parse_book_depth(_attribute(element, "bookDepth")),
        search_depth=_attribute(element, "searchDepth", ""),
        engine_id=_attribute(element, "engine", "unknown"),
    )


def parse_game(element: ET.Element) -> GameRecord:
    """
    Build a game record from a <game> element.

    Raises:
        ValueError: If the game is malformed.
    """
    analysis_element = element.find("analysis")
    if analysis_element is None:
        raise ValueError("game has no analysis")
    moves_element = element.find("moves")
    move_text = MISSING_MOVES
    if moves_element is not None and moves_element.text:
        move_text = moves_element.text
    return GameRecord.from_move_text(
        _parse_tags(element.find("tags")),
        move_text,
        parse_analysis(analysis_element),
    )


def parse_document(root: ET.Element, source: str = "<document>") -> Iterator[GameRecord]:
    """
    Yield the games of a parsed document.

    Malformed games are skipped with a warning.
    """
    for index, element in enumerate(root.iter("game"), start=1):
        try:
            yield parse_game(element)
        except ValueError as e:
            logger.warning("Skipping game %d in %s: %s", index, source, e)


def read_analysis_string(text: str) -> list[GameRecord]:
    """Parse an analysis document held in a string."""
    try:
        root = ET.fromstring(text)
    except ET.ParseError as e:
        raise IngestError(f"Malformed analysis document: {e}") from e
    return list(parse_document(root))


def read_analysis_file(filepath: str | Path) -> list[GameRecord]:
    """
    Parse an analysis file.

    Raises:
        FileNotFoundError: If the file does not exist.
        IngestError: If the file cannot be read or parsed.
    """
    filepath = Path(filepath)
    try:
        with open(filepath, "rb") as f:
            tree = ET.parse(f)
    except ET.ParseError as e:
        raise IngestError(f"Malformed analysis document {filepath}: {e}") from e
    except FileNotFoundError:
        raise
    except OSError as e:
        raise IngestError(f"Could not read {filepath}: {e}") from e
    return list(parse_document(tree.getroot(), str(filepath)))

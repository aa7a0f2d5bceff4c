"""
Puzzle Source

Fetches puzzle level data from dailyakari.com to learn the grid size the
board image is expected to have.
"""

import logging
from typing import List, Optional

import requests

logger = logging.getLogger(__name__)


DAILY_PUZZLE_URL = "https://dailyakari.com/dailypuzzle"
ARCHIVE_PUZZLE_URL = "https://dailyakari.com/archivepuzzle"

# Problem number that selects today's puzzle
DAILY_PROBLEM_NO = -1

DEFAULT_TIMEOUT = 10.0


class PuzzleFetchError(Exception):
    """Raised when puzzle data cannot be fetched or decoded."""


def parse_level_data(text: str) -> List[List[str]]:
    """
    Parse level data text into a grid of cell tokens.

    The grid is everything before the first blank line; rows are separated
    by newlines and cells by single spaces.

    Args:
        text: levelData string from the puzzle API

    Returns:
        List of rows, each a list of cell tokens
    """
    grid_part = text.split("\n\n", 1)[0]
    return [row.split(" ") for row in grid_part.split("\n")]


def puzzle_url(problem_no: int) -> str:
    """URL serving the level data of a puzzle (-1 for today's)."""
    if problem_no == DAILY_PROBLEM_NO:
        return DAILY_PUZZLE_URL
    return f"{ARCHIVE_PUZZLE_URL}?number={problem_no}"


def fetch_problem_grid(problem_no: int, session: Optional[requests.Session] = None,
                       timeout: float = DEFAULT_TIMEOUT) -> List[List[str]]:
    """
    Fetch and parse a puzzle grid.

    Args:
        problem_no: Archive puzzle number, or -1 for today's puzzle
        session: Optional requests session to reuse
        timeout: Request timeout in seconds

    Returns:
        Puzzle grid as rows of cell tokens

    Raises:
        PuzzleFetchError: On network, HTTP or payload errors
    """
    url = puzzle_url(problem_no)
    http = session or requests

    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()
    except requests.RequestException as e:
        raise PuzzleFetchError(f"failed to fetch problem data: {e}") from e
    except ValueError as e:
        raise PuzzleFetchError(f"failed to decode problem data: {e}") from e

    level_data = payload.get("levelData") if isinstance(payload, dict) else None
    if not isinstance(level_data, str):
        raise PuzzleFetchError("problem data has no levelData field")

    grid = parse_level_data(level_data)
    logger.debug(f"Fetched puzzle {problem_no}: {len(grid)} rows")
    return grid

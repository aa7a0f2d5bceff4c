"""
HTTP Service

FastAPI application exposing cell positions for a captured board image.
"""

import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

import cv2
import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .detect import CellDetectionError, detect_cells
from .grid import GridCellMapper, GridIdentificationError
from .puzzle_source import DAILY_PROBLEM_NO, PuzzleFetchError, fetch_problem_grid
from .settings import DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class PositionsRequest(BaseModel):
    image_data_base64: str  # data URL or plain base64 PNG
    problem_no: int = DAILY_PROBLEM_NO


class RectModel(BaseModel):
    min_x: int
    min_y: int
    max_x: int
    max_y: int


class CellModel(BaseModel):
    rect: RectModel
    row: int
    col: int


class PositionsResponse(BaseModel):
    cells: List[CellModel]


def decode_image(data: str) -> np.ndarray:
    """
    Decode a base64 image (optionally a data URL) to OpenCV BGR format.

    Raises:
        ValueError: If the payload is not valid base64 or not an image
    """
    if "base64," in data:
        data = data.split("base64,", 1)[1]

    try:
        img_bytes = base64.b64decode(data, validate=True)
    except binascii.Error as e:
        raise ValueError(f"invalid base64 image data: {e}") from e

    img_array = np.frombuffer(img_bytes, dtype=np.uint8)
    img = cv2.imdecode(img_array, cv2.IMREAD_COLOR) if img_array.size else None
    if img is None:
        raise ValueError("failed to decode image")

    return img


def create_app(settings: Optional[Dict[str, Any]] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings dictionary (defaults to DEFAULT_SETTINGS)

    Returns:
        Configured FastAPI app
    """
    settings = settings or DEFAULT_SETTINGS.copy()
    mapper = GridCellMapper.from_settings(settings)
    timeout = float(settings.get("request_timeout", DEFAULT_SETTINGS["request_timeout"]))

    app = FastAPI(title="Akari Locator", version="1.0.0")

    # The browser extension calls the service from the puzzle page
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    def root():
        return {"message": "Hello, World!"}

    @app.get("/health")
    def health():
        return {"status": "healthy", "service": "akari-locator"}

    @app.post("/positions", response_model=PositionsResponse)
    def positions(request: PositionsRequest):
        """
        Locate every cell of the board image.

        Grid dimensions come from the puzzle's level data.
        """
        try:
            image = decode_image(request.image_data_base64)
        except ValueError as e:
            logger.error(f"Error decoding image data: {e}")
            raise HTTPException(status_code=400, detail="Invalid base64 image data")

        try:
            grid = fetch_problem_grid(request.problem_no, timeout=timeout)
        except PuzzleFetchError as e:
            logger.error(f"Error fetching problem data: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch problem data")

        if not grid or not grid[0] or grid[0] == [""]:
            logger.error("Error: problem data is empty")
            raise HTTPException(status_code=500, detail="Problem data is empty")

        rows, cols = len(grid), len(grid[0])
        try:
            cells = detect_cells(image, rows, cols, mapper=mapper)
        except (CellDetectionError, GridIdentificationError) as e:
            logger.error(f"Error detecting cell positions: {e}")
            raise HTTPException(status_code=500, detail="Failed to detect cell positions")

        logger.info(f"Puzzle {request.problem_no}: located {len(cells)} cells on {rows}x{cols} grid")
        return {"cells": [cell.to_dict() for cell in cells]}

    return app

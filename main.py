"""
Akari Locator - Entry Point

Runs the HTTP service or processes a single board image.

Example:
    python main.py serve --port 8080
    python main.py locate board.png --rows 7 --cols 7 --debug
    python main.py read board.png --rows 7 --cols 7 --templates assets/templates --debug
"""

import sys
import logging
import argparse
from datetime import datetime
from pathlib import Path

import cv2
from PIL import Image

from akari_locator.detect import (
    BoardReader,
    CellDetectionError,
    DEBUG_DIR,
    SymbolTemplates,
    detect_cells,
    save_debug_image,
)
from akari_locator.grid import (
    GridCellMapper,
    GridIdentificationError,
    get_strategy_info,
    get_strategy_names,
)
from akari_locator.settings import load_settings


logger = logging.getLogger(__name__)


def setup_logging(debug: bool) -> None:
    """Configure logging - output to both console and file."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(),  # Console output
            logging.FileHandler("akari_locator.log", mode='w', encoding='utf-8')  # File output
        ]
    )


def _load_image(path: str):
    image = cv2.imread(path, cv2.IMREAD_COLOR)
    if image is None:
        raise FileNotFoundError(f"Cannot read image: {path}")
    return image


def _save_debug(args, cells, symbols=None) -> None:
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = DEBUG_DIR / f"debug_{timestamp}.png"
    pil_image = Image.open(args.image)
    save_debug_image(pil_image, cells, str(path), symbols=symbols,
                     total_rows=args.rows, total_cols=args.cols)
    logger.info(f"Debug image saved: {path}")


def run_serve(args, settings) -> int:
    """Run the HTTP service under uvicorn."""
    import uvicorn
    from akari_locator.server import create_app

    host = args.host or settings["host"]
    port = args.port or settings["port"]
    logger.info(f"Starting server on {host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port)
    return 0


def run_locate(args, settings) -> int:
    """Print the located cells of one image."""
    image = _load_image(args.image)
    mapper = GridCellMapper.from_settings(settings)

    try:
        cells = detect_cells(image, args.rows, args.cols, mapper=mapper)
    except (CellDetectionError, GridIdentificationError) as e:
        logger.error(f"Failed to locate cells: {e}")
        return 1

    for cell in sorted(cells, key=lambda c: (c.row, c.col)):
        r = cell.rect
        print(f"({cell.row},{cell.col}) rect=({r.min_x},{r.min_y})-({r.max_x},{r.max_y})")
    print(f"{len(cells)}/{args.rows * args.cols} cells located")

    if args.debug or settings.get("debug_enabled"):
        _save_debug(args, cells)

    return 0


def run_read(args, settings) -> int:
    """Print the board text of one image."""
    image = _load_image(args.image)

    templates = SymbolTemplates()
    template_dir = Path(args.templates or settings["template_dir"])
    if not templates.load_templates(template_dir):
        logger.warning("Not all glyph templates loaded - some numbered blocks may read as '#'")

    reader = BoardReader(templates, GridCellMapper.from_settings(settings))
    try:
        reading = reader.read(image, args.rows, args.cols)
    except (CellDetectionError, GridIdentificationError) as e:
        logger.error(f"Failed to read board: {e}")
        return 1

    print(reading.text)

    if args.debug or settings.get("debug_enabled"):
        _save_debug(args, reading.cells, reading.symbols)
    return 0


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Akari Locator - Daily Akari board cell locator"
    )
    parser.add_argument(
        "--strategy", "-s",
        choices=get_strategy_names(),
        help="Axis strategy (default: from config.json): " + "; ".join(
            f"{info['name']} - {info['description']}" for info in get_strategy_info()
        )
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", help="Bind address (default: from config.json)")
    serve.add_argument("--port", type=int, help="Port (default: from config.json)")

    for name, help_text in (("locate", "Print located cells"), ("read", "Print board text")):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("image", help="Board image path")
        cmd.add_argument("--rows", "-r", type=int, required=True, help="Number of rows")
        cmd.add_argument("--cols", "-c", type=int, required=True, help="Number of columns")
        cmd.add_argument("--debug", "-d", action="store_true", help="Save an annotated debug image")
        if name == "read":
            cmd.add_argument("--templates", "-t", help="Glyph template directory")

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Entry point for the akari-locator command."""
    args = parse_args(argv)
    settings = load_settings()
    setup_logging(args.verbose or settings.get("debug_enabled", False))

    if args.strategy:
        settings["axis_strategy"] = args.strategy

    commands = {
        "serve": run_serve,
        "locate": run_locate,
        "read": run_read,
    }
    return commands[args.command](args, settings)


if __name__ == "__main__":
    sys.exit(main())

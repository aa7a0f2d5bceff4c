#!/usr/bin/env python3
"""
Template extraction tool for block digit recognition.

Extracts glyph templates from a board image where numbered blocks are
visible. Saves templates to assets/templates/ for the symbol classifier.

Usage:
    python extract_templates.py <image_path>

The script will:
1. Detect all cells and keep the black blocks
2. Display each block and ask you to label it (0-4, 's' to skip)
3. Average multiple samples of each digit
4. Save templates to assets/templates/

Examples:
    python extract_templates.py debug/board_0412.png
"""

import sys
from pathlib import Path
from collections import defaultdict

import cv2
import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from akari_locator.detect import (
    CellDetectionError,
    Symbol,
    TEMPLATE_FILES,
    crop_cell,
    find_cell_rects,
    is_block,
)


TEMPLATE_DIR = Path("./assets/templates")

# Templates are cropped tighter than cells so they fit inside a cell crop
TEMPLATE_INSET = 0.2

KEY_TO_SYMBOL = {
    ord('0'): Symbol.ZERO,
    ord('1'): Symbol.ONE,
    ord('2'): Symbol.TWO,
    ord('3'): Symbol.THREE,
    ord('4'): Symbol.FOUR,
}


def extract_blocks(image_path: str) -> tuple:
    """
    Extract all black block crops from an image.

    Returns (list of (gray_crop, bgr_crop) tuples, cell_size).
    """
    image = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if image is None:
        print(f"ERROR: Could not read {image_path}")
        return [], 0

    try:
        detection = find_cell_rects(image)
    except CellDetectionError as e:
        print(f"ERROR: Could not detect cells: {e}")
        return [], 0

    print(f"Detected {len(detection.rects)} cells, cell size: {detection.cell_size}px")

    blocks = []
    for rect in detection.rects:
        cell = crop_cell(image, rect, TEMPLATE_INSET)
        if cell.size == 0 or not is_block(cell):
            continue
        blocks.append((cv2.cvtColor(cell, cv2.COLOR_BGR2GRAY), cell))

    return blocks, detection.cell_size


def interactive_label(blocks: list) -> dict:
    """
    Interactively label blocks by showing them to the user.

    Returns dict mapping Symbol -> list of grayscale crops.
    """
    samples = defaultdict(list)

    print("\n" + "="*60)
    print("Interactive Template Labeling")
    print("="*60)
    print("For each block shown, enter its digit (0-4), 's' to skip, or 'q' to quit.")
    print("Plain blocks without a digit should be skipped.")
    print()

    cv2.namedWindow("Block", cv2.WINDOW_NORMAL)
    cv2.resizeWindow("Block", 200, 200)

    for i, (gray, original) in enumerate(blocks):
        cv2.imshow("Block", cv2.resize(original, (100, 100)))

        print(f"Block {i+1}/{len(blocks)} - Enter digit (0-4), 's' to skip, 'q' to quit: ", end="", flush=True)

        while True:
            key = cv2.waitKey(0) & 0xFF

            if key == ord('q'):
                print("quit")
                cv2.destroyAllWindows()
                return samples
            elif key == ord('s'):
                print("skipped")
                break
            elif key in KEY_TO_SYMBOL:
                symbol = KEY_TO_SYMBOL[key]
                samples[symbol].append(gray)
                print(f"{symbol.value} (total samples: {len(samples[symbol])})")
                break
            else:
                print(f"\n  Invalid key. Enter 0-4, 's', or 'q': ", end="", flush=True)

    cv2.destroyAllWindows()
    return samples


def create_templates(samples: dict, size: int) -> dict:
    """
    Create averaged templates from samples.

    Returns dict mapping Symbol -> template image.
    """
    templates = {}

    for symbol, crops in samples.items():
        if not crops:
            continue

        resized = [cv2.resize(c, (size, size)) for c in crops]
        stacked = np.stack(resized, axis=0).astype(np.float32)
        templates[symbol] = np.mean(stacked, axis=0).astype(np.uint8)
        print(f"Digit {symbol.value}: {len(crops)} samples averaged")

    return templates


def save_templates(templates: dict):
    """Save templates to assets/templates/."""
    TEMPLATE_DIR.mkdir(parents=True, exist_ok=True)

    for symbol, template in templates.items():
        path = TEMPLATE_DIR / TEMPLATE_FILES[symbol]
        cv2.imwrite(str(path), template)
        print(f"Saved: {path}")


def main():
    if len(sys.argv) < 2:
        print("Usage: python extract_templates.py <image_path>")
        return 1

    image_path = sys.argv[1]
    print(f"Using image: {image_path}")

    blocks, cell_size = extract_blocks(image_path)
    if not blocks:
        print("No blocks found")
        return 1

    samples = interactive_label(blocks)
    if not samples:
        print("\nNo samples collected")
        return 0

    size = int(cell_size * (1 - 2 * TEMPLATE_INSET))
    save_templates(create_templates(dict(samples), size))
    print(f"\nTemplates saved to {TEMPLATE_DIR}/")
    return 0


if __name__ == "__main__":
    sys.exit(main())

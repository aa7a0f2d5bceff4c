"""
Unit tests for GridCellMapper.

Covers merging of per-axis results, axis tagging of failures and
configuration from settings.
"""

import pytest

from akari_locator.grid import (
    BoardSize,
    Cell,
    GridCellMapper,
    InputError,
    Rect,
    SlotOverflowError,
    identify_grid_cells,
)
from akari_locator.grid.strategies import AdaptiveAxisStrategy
from akari_locator.settings import DEFAULT_SETTINGS


def square(cx, cy, half=30):
    """Rect of size 2*half centered on (cx, cy)."""
    return Rect(cx - half, cy - half, cx + half, cy + half)


BOARD = BoardSize(width=500, height=500)


class TestRect:
    def test_from_xywh(self):
        rect = Rect.from_xywh(10, 20, 30, 40)
        assert rect == Rect(10, 20, 40, 60)
        assert (rect.width, rect.height, rect.area) == (30, 40, 1200)

    def test_center_is_corner_midpoint(self):
        assert Rect(10, 20, 41, 60).center == (25.5, 40.0)

    def test_cell_to_dict(self):
        cell = Cell(rect=Rect(1, 2, 3, 4), row=5, col=6)
        assert cell.to_dict() == {
            "rect": {"min_x": 1, "min_y": 2, "max_x": 3, "max_y": 4},
            "row": 5,
            "col": 6,
        }


class TestGridCellMapper:
    def test_merge_four_cells(self):
        rects = [square(50, 50), square(150, 250), square(350, 150), square(450, 450)]

        cells = GridCellMapper().identify(BOARD, 5, 5, rects)

        assert len(cells) == 4
        assert [(c.row, c.col) for c in cells] == [(0, 0), (2, 1), (1, 3), (4, 4)]
        assert [c.rect for c in cells] == rects
        assert len({(c.row, c.col) for c in cells}) == 4

    def test_full_grid_any_order(self):
        rects = [square(50 + 100 * c, 50 + 100 * r) for r in range(5) for c in range(5)]
        rects.reverse()

        cells = identify_grid_cells(BOARD, 5, 5, rects)

        for cell in cells:
            cx, cy = cell.rect.center
            assert cell.col == int(cx // 100)
            assert cell.row == int(cy // 100)

    def test_rectangular_board(self):
        # 3 rows x 6 columns on a 600x300 board
        board = BoardSize(width=600, height=300)
        rects = [square(50 + 100 * c, 50 + 100 * r, half=40) for r in range(3) for c in range(6)]

        cells = identify_grid_cells(board, 3, 6, rects)

        assert sorted((c.row, c.col) for c in cells) == [(r, c) for r in range(3) for c in range(6)]

    def test_empty_rectangles(self):
        with pytest.raises(InputError) as exc_info:
            GridCellMapper().identify(BOARD, 5, 5, [])
        assert exc_info.value.axis is None

    def test_x_axis_overflow_is_tagged(self):
        # Six distinct columns on a five-column board
        rects = [square(40 + 84 * i, 50, half=20) for i in range(6)]

        with pytest.raises(SlotOverflowError) as exc_info:
            GridCellMapper().identify(BOARD, 5, 5, rects)

        assert exc_info.value.axis == "x"
        assert str(exc_info.value).startswith("x-axis identification failed")

    def test_y_axis_overflow_is_tagged(self):
        rects = [square(50, 40 + 84 * i, half=20) for i in range(6)]

        with pytest.raises(SlotOverflowError) as exc_info:
            GridCellMapper().identify(BOARD, 5, 5, rects)

        assert exc_info.value.axis == "y"
        assert str(exc_info.value).startswith("y-axis identification failed")

    def test_invalid_row_count_is_tagged(self):
        with pytest.raises(InputError) as exc_info:
            GridCellMapper().identify(BOARD, 0, 5, [square(50, 50)])
        assert exc_info.value.axis == "y"


class TestFromSettings:
    def test_defaults(self):
        mapper = GridCellMapper.from_settings(DEFAULT_SETTINGS)
        assert isinstance(mapper.strategy, AdaptiveAxisStrategy)
        assert mapper.strategy.cluster_ratio == DEFAULT_SETTINGS["cluster_ratio"]
        assert mapper.strategy.max_pitch_retries == DEFAULT_SETTINGS["max_pitch_retries"]

    def test_configured_ratio(self):
        mapper = GridCellMapper.from_settings({"axis_strategy": "adaptive", "cluster_ratio": 0.5})
        assert mapper.strategy.cluster_ratio == 0.5

    @pytest.mark.parametrize("ratio", [0, 3.0])
    def test_out_of_range_ratio_is_rejected(self, ratio):
        with pytest.raises(ValueError):
            GridCellMapper.from_settings({"cluster_ratio": ratio})

    def test_unknown_strategy_is_rejected(self):
        with pytest.raises(ValueError):
            GridCellMapper.from_settings({"axis_strategy": "fixed"})

    def test_strategy_name_helper(self):
        rects = [square(50, 50), square(150, 150)]
        cells = identify_grid_cells(BOARD, 5, 5, rects, strategy="adaptive")
        assert [(c.row, c.col) for c in cells] == [(0, 0), (1, 1)]

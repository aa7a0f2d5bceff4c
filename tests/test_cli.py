"""
Tests for the command line entry point.
"""

import cv2
import pytest

import main
from conftest import BOARD_CELLS


@pytest.fixture
def board_file(board_image, tmp_path, monkeypatch):
    # Log file and config.json resolve against the working directory
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "board.png"
    cv2.imwrite(str(path), board_image)
    return str(path)


def test_parse_args_locate():
    args = main.parse_args(["--strategy", "adaptive", "locate", "board.png", "-r", "7", "-c", "9"])
    assert args.command == "locate"
    assert (args.strategy, args.rows, args.cols, args.debug) == ("adaptive", 7, 9, False)


def test_parse_args_rejects_unknown_strategy():
    with pytest.raises(SystemExit):
        main.parse_args(["--strategy", "fixed", "serve"])


def test_locate(board_file, capsys):
    assert main.main(["locate", board_file, "--rows", "5", "--cols", "5"]) == 0

    out = capsys.readouterr().out
    assert f"{BOARD_CELLS * BOARD_CELLS}/{BOARD_CELLS * BOARD_CELLS} cells located" in out


def test_read(board_file, capsys):
    assert main.main(["read", board_file, "--rows", "5", "--cols", "5"]) == 0

    lines = capsys.readouterr().out.split()
    assert lines == [".....", ".....", "..#..", ".....", "....."]


def test_locate_wrong_grid_fails(board_file):
    assert main.main(["locate", board_file, "--rows", "3", "--cols", "3"]) == 1


def test_strategy_help_lists_descriptions(capsys):
    with pytest.raises(SystemExit):
        main.parse_args(["--help"])
    help_text = " ".join(capsys.readouterr().out.split())
    assert "adaptive - Adaptive pitch" in help_text


def test_read_debug_image_carries_symbols(board_file, monkeypatch):
    saved = {}

    def fake_save(image, cells, path, symbols=None, total_rows=None, total_cols=None):
        saved.update(cells=cells, path=path, symbols=symbols)

    monkeypatch.setattr(main, "save_debug_image", fake_save)

    assert main.main(["read", board_file, "--rows", "5", "--cols", "5", "--debug"]) == 0

    assert len(saved["symbols"]) == len(saved["cells"]) == BOARD_CELLS * BOARD_CELLS
    assert [s.value for s in saved["symbols"]].count("#") == 1


def test_read_debug_image_is_written(board_file, tmp_path):
    assert main.main(["read", board_file, "--rows", "5", "--cols", "5", "--debug"]) == 0
    assert len(list((tmp_path / "debug").glob("debug_*.png"))) == 1

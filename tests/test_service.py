"""
Tests for the HTTP service, the puzzle source and settings.

Network access is stubbed with monkeypatch; the service runs in-process
through FastAPI's TestClient.
"""

import base64
import json

import cv2
import pytest
import requests
from fastapi.testclient import TestClient

from akari_locator import server
from akari_locator.puzzle_source import (
    ARCHIVE_PUZZLE_URL,
    DAILY_PUZZLE_URL,
    PuzzleFetchError,
    fetch_problem_grid,
    parse_level_data,
    puzzle_url,
)
from akari_locator.settings import DEFAULT_SETTINGS, load_settings, save_settings

from conftest import BOARD_CELLS


LEVEL_DATA = "\n".join(" ".join(["."] * BOARD_CELLS) for _ in range(BOARD_CELLS)) + "\n\nid 42"


def to_data_url(image):
    ok, buf = cv2.imencode(".png", image)
    assert ok
    return "data:image/png;base64," + base64.b64encode(buf.tobytes()).decode("ascii")


# ============================================================================
# Puzzle source
# ============================================================================

class FakeResponse:
    def __init__(self, payload, status=200):
        self._payload = payload
        self.status_code = status

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        if self.error:
            raise self.error
        return self.response


class TestPuzzleSource:
    def test_parse_level_data(self):
        grid = parse_level_data("0 . .\n. # .\n. . 1\n\nsolution ...")
        assert grid == [["0", ".", "."], [".", "#", "."], [".", ".", "1"]]

    def test_parse_without_metadata(self):
        assert parse_level_data(". .\n. .") == [[".", "."], [".", "."]]

    def test_puzzle_url(self):
        assert puzzle_url(-1) == DAILY_PUZZLE_URL
        assert puzzle_url(12) == f"{ARCHIVE_PUZZLE_URL}?number=12"

    def test_fetch(self):
        session = FakeSession(FakeResponse({"levelData": LEVEL_DATA}))

        grid = fetch_problem_grid(7, session=session, timeout=3.0)

        assert len(grid) == BOARD_CELLS and len(grid[0]) == BOARD_CELLS
        assert session.calls == [(f"{ARCHIVE_PUZZLE_URL}?number=7", 3.0)]

    @pytest.mark.parametrize("session", [
        FakeSession(error=requests.ConnectionError("offline")),
        FakeSession(FakeResponse({}, status=503)),
        FakeSession(FakeResponse(ValueError("not json"))),
        FakeSession(FakeResponse({"other": 1})),
        FakeSession(FakeResponse(["not", "a", "dict"])),
    ])
    def test_fetch_errors(self, session):
        with pytest.raises(PuzzleFetchError):
            fetch_problem_grid(-1, session=session)


# ============================================================================
# HTTP service
# ============================================================================

@pytest.fixture
def client(monkeypatch):
    def fake_fetch(problem_no, timeout=None):
        return parse_level_data(LEVEL_DATA)

    monkeypatch.setattr(server, "fetch_problem_grid", fake_fetch)
    return TestClient(server.create_app())


class TestService:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json() == {"message": "Hello, World!"}

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"

    def test_positions(self, client, board_image):
        response = client.post("/positions", json={
            "image_data_base64": to_data_url(board_image),
            "problem_no": 3,
        })

        assert response.status_code == 200
        cells = response.json()["cells"]
        assert len(cells) == BOARD_CELLS * BOARD_CELLS
        assert sorted((c["row"], c["col"]) for c in cells) == [
            (r, c) for r in range(BOARD_CELLS) for c in range(BOARD_CELLS)
        ]
        assert set(cells[0]["rect"]) == {"min_x", "min_y", "max_x", "max_y"}

    def test_plain_base64_is_accepted(self, client, board_image):
        data = to_data_url(board_image).split("base64,", 1)[1]
        response = client.post("/positions", json={"image_data_base64": data})
        assert response.status_code == 200

    def test_invalid_base64(self, client):
        response = client.post("/positions", json={"image_data_base64": "data:image/png;base64,@@@"})
        assert response.status_code == 400

    def test_not_an_image(self, client):
        data = base64.b64encode(b"definitely not a png").decode("ascii")
        response = client.post("/positions", json={"image_data_base64": data})
        assert response.status_code == 400

    def test_fetch_failure(self, monkeypatch, client, board_image):
        def failing_fetch(problem_no, timeout=None):
            raise PuzzleFetchError("offline")

        monkeypatch.setattr(server, "fetch_problem_grid", failing_fetch)
        response = client.post("/positions", json={"image_data_base64": to_data_url(board_image)})
        assert response.status_code == 500

    def test_empty_problem(self, monkeypatch, client, board_image):
        monkeypatch.setattr(server, "fetch_problem_grid", lambda problem_no, timeout=None: [[""]])
        response = client.post("/positions", json={"image_data_base64": to_data_url(board_image)})
        assert response.status_code == 500
        assert response.json()["detail"] == "Problem data is empty"

    def test_detection_failure(self, client, blank_image):
        response = client.post("/positions", json={"image_data_base64": to_data_url(blank_image)})
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to detect cell positions"

    def test_grid_mismatch(self, monkeypatch, client, board_image):
        # Board has five columns but the puzzle claims three
        monkeypatch.setattr(server, "fetch_problem_grid",
                            lambda problem_no, timeout=None: [["."] * 3 for _ in range(5)])
        response = client.post("/positions", json={"image_data_base64": to_data_url(board_image)})
        assert response.status_code == 500


def test_decode_image_round_trip(board_image):
    decoded = server.decode_image(to_data_url(board_image))
    assert decoded.shape == board_image.shape


# ============================================================================
# Settings
# ============================================================================

class TestSettings:
    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_settings(tmp_path / "config.json") == DEFAULT_SETTINGS

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "config.json"
        settings = DEFAULT_SETTINGS.copy()
        settings["cluster_ratio"] = 0.5

        save_settings(settings, path)

        assert load_settings(path)["cluster_ratio"] == 0.5

    def test_partial_file_merged_with_defaults(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"port": 9000}), encoding="utf-8")

        settings = load_settings(path)

        assert settings["port"] == 9000
        assert settings["cluster_ratio"] == DEFAULT_SETTINGS["cluster_ratio"]

    @pytest.mark.parametrize("content", ["{not json", "[1, 2, 3]"])
    def test_invalid_file_gives_defaults(self, tmp_path, content):
        path = tmp_path / "config.json"
        path.write_text(content, encoding="utf-8")
        assert load_settings(path) == DEFAULT_SETTINGS

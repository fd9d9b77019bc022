import json
import logging
import logging.handlers

import pytest

from utils import load_config, map_range, setup_logging, to_canvas_coords


def test_to_canvas_coords_scales_by_buffer_over_display():
    assert to_canvas_coords((250, 200), (0, 0, 500, 400), (1000, 800)) == (500, 400)
    assert to_canvas_coords((110, 60), (10, 10, 100, 100), (100, 100)) == (100, 50)


def test_to_canvas_coords_rejects_empty_display():
    assert to_canvas_coords((1, 1), (0, 0, 0, 100), (100, 100)) is None


def test_map_range():
    assert map_range(5, 0, 10, -1, 1) == 0
    assert map_range(0, 0, 10, 5, 0) == 5
    assert map_range(20, 0, 10, 0, 1) == 2
    assert map_range(3, 4, 4, 7, 9) == 7


def test_load_config_reads_json(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"credit": {"text": "Hello"}}))
    assert load_config(str(path)) == {"credit": {"text": "Hello"}}


def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))


def test_load_config_invalid_json_raises(tmp_path):
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_setup_logging_writes_to_rotating_file(tmp_path):
    log_file = tmp_path / "logs" / "app.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.info("hello from the test")
        for handler in root.handlers:
            handler.flush()
        assert "hello from the test" in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_setup_logging_twice_replaces_handlers(tmp_path):
    log_file = tmp_path / "app.log"
    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    try:
        config = {"logging": {"level": "info", "log_file": str(log_file)}}
        setup_logging(config)
        setup_logging(config)
        assert len(root.handlers) == 2
        assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

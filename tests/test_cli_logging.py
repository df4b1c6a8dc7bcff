"""Tests for the CLI entry point and logging setup."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest

from gcode_layers import cli, parse
from gcode_layers.utils import logging_config


GCODE = "; test part\nG1 Z0.2\nG1 X10 E1\nG1 X10 Y10 E2\nG1 X0 Y10 Z0.4 E3\nM107\n"


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging_config.setup_logging("WARNING", to_stderr=False, capture_warnings=False)
    logging_config.pop_context()


@pytest.fixture()
def gcode_file(tmp_path: Path) -> Path:
    path = tmp_path / "part.gcode"
    path.write_text(GCODE, encoding="utf-8")
    return path


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


class TestCli:
    def test_summary_text(self, gcode_file: Path, capsys: pytest.CaptureFixture) -> None:
        assert cli.main([str(gcode_file)]) == 0
        out = capsys.readouterr().out
        assert "Layers:          2" in out
        assert "Segments:        3" in out

    def test_json_with_layers(self, gcode_file: Path, capsys: pytest.CaptureFixture) -> None:
        assert cli.main([str(gcode_file), "--json", "--layers"]) == 0
        summary = json.loads(capsys.readouterr().out)
        assert summary["layers"] == 2
        assert [row["start_line"] for row in summary["layer_table"]] == [2, 4]
        assert summary["ignored_commands"] == {"M107": 1}
        assert summary["bounds"] == {"min": [0.0, 0.0, 0.2], "max": [10.0, 10.0, 0.4]}

    def test_missing_source(self, tmp_path: Path) -> None:
        assert cli.main([str(tmp_path / "nope.gcode")]) == 1

    def test_bad_config(self, gcode_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
        cfg = tmp_path / "bad.yaml"
        cfg.write_text("schema: wrong\n", encoding="utf-8")
        assert cli.main([str(gcode_file), "--config", str(cfg)]) == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_malformed_yaml_config(
        self, gcode_file: Path, tmp_path: Path, capsys: pytest.CaptureFixture
    ) -> None:
        cfg = tmp_path / "broken.yaml"
        cfg.write_text("loader: [unclosed\n", encoding="utf-8")
        assert cli.main([str(gcode_file), "--config", str(cfg)]) == 1
        assert "Error loading config" in capsys.readouterr().err

    def test_summarize_without_table(self) -> None:
        summary = cli.summarize(parse(GCODE))
        assert "layer_table" not in summary
        assert summary["segments"] == 3


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------


class TestLogging:
    def test_setup_is_idempotent(self) -> None:
        root = logging.getLogger()
        logging_config.setup_logging("INFO")
        before = len(root.handlers)
        logging_config.setup_logging("INFO")
        assert len(root.handlers) == before

    def test_level_applied(self) -> None:
        logging_config.setup_logging("DEBUG", to_stderr=False)
        assert logging.getLogger().level == logging.DEBUG

    def test_json_file_includes_context(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "run.log"
        logging_config.setup_logging("INFO", str(log_file), json=True, to_stderr=False)
        logging_config.push_context(source="part.gcode")
        logging.getLogger("gcode_layers.test").info("hello")
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["msg"] == "hello"
        assert record["lvl"] == "INFO"
        assert record["source"] == "part.gcode"

    def test_human_format(self) -> None:
        formatter = logging_config.ContextFormatter("human", use_color=False)
        logging_config.push_context(source="a.gcode")
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg %d", (3,), None)
        line = formatter.format(record)
        assert "| WARNING  |" in line
        assert "source=a.gcode |" in line
        assert line.endswith("msg 3")

    def test_pop_context(self) -> None:
        logging_config.push_context(a=1, b=2)
        logging_config.pop_context(keys=["a"])
        assert logging_config.get_context() == {"b": 2}
        logging_config.pop_context()
        assert logging_config.get_context() == {}

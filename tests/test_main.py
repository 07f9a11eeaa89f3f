"""
Tests for the command-line entry point
"""
import json
import sys

import pytest
from loguru import logger

import config
import main


@pytest.fixture
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "LOG_DIR", str(tmp_path / "logs"))
    yield tmp_path / "logs"
    logger.remove()
    logger.add(sys.stderr)


def _profile_file(tmp_path, data):
    path = tmp_path / "profile.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestMain:
    """Logging setup and exit codes of main()"""

    def test_configures_file_sink(self, tmp_path, log_dir, capsys):
        path = _profile_file(tmp_path, {"date_of_birth": "1990-06-15"})
        main.main(["--profile", path, "--json", "today", "--date", "2025-12-27"])
        assert list(log_dir.glob("energy_engine_*.log"))
        assert '"perfect_day_score"' in capsys.readouterr().out

    def test_short_coordinate_profile(self, tmp_path, log_dir, capsys):
        path = _profile_file(tmp_path, {
            "date_of_birth": "1990-06-15",
            "birth_place": {"city": "X", "country": "Y", "lat": 1.0, "lon": 2.0},
        })
        main.main(["--profile", path, "--json", "today", "--date", "2025-12-27"])
        assert capsys.readouterr().out

    def test_bad_profile_exits_2(self, tmp_path, log_dir):
        path = _profile_file(tmp_path, {"date_of_birth": "1990-06-15", "birth_place": {"altitude": 5}})
        with pytest.raises(SystemExit) as exc:
            main.main(["--profile", path, "today"])
        assert exc.value.code == 2

    def test_malformed_json_exits_2(self, tmp_path, log_dir):
        path = tmp_path / "profile.json"
        path.write_text("{not json")
        with pytest.raises(SystemExit) as exc:
            main.main(["--profile", str(path), "today"])
        assert exc.value.code == 2

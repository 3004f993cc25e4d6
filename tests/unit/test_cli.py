"""
Unit tests for the command-line interface.
"""

import pytest

from api.cli import main


class TestCli:

    def test_show(self, race_data_dir, capsys):
        main(["--data-dir", str(race_data_dir), "show"])
        out = capsys.readouterr().out
        assert "TS12" in out
        assert "Wind window" in out

    def test_estimate(self, race_data_dir, capsys):
        main(["--data-dir", str(race_data_dir), "estimate", "START", "TS12", "--time", "1"])
        out = capsys.readouterr().out
        assert "START -> TS12 at 1h" in out
        assert "Sailing mode" in out
        assert "nm (great circle)" in out

    def test_estimate_reverse(self, race_data_dir, capsys):
        main(["--data-dir", str(race_data_dir), "estimate", "START", "TS12", "--reverse"])
        assert "TS12 -> START" in capsys.readouterr().out

    def test_paths(self, race_data_dir, capsys):
        main(["--data-dir", str(race_data_dir), "paths", "START", "--steps", "2"])
        out = capsys.readouterr().out
        assert "path(s) found" in out
        assert "START -> VL1" in out

    def test_target(self, race_data_dir, capsys):
        main(["--data-dir", str(race_data_dir), "target", "START", "TS12", "--steps", "3"])
        assert "START -> VL1 -> TS12" in capsys.readouterr().out

    def test_unknown_buoy_exits(self, race_data_dir, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--data-dir", str(race_data_dir), "estimate", "START", "NOPE"])
        assert exc_info.value.code == 1
        assert "NOPE" in capsys.readouterr().out

    def test_missing_data_dir_exits(self, tmp_path):
        with pytest.raises(SystemExit):
            main(["--data-dir", str(tmp_path / "none"), "show"])

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])

"""Tests for the stormscope-bolt CLI."""

import json

import pytest
from PIL import Image

from stormscope.bolt.cli import build_parser, main


class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.width == 800
        assert args.height == 600
        assert args.count == 1
        assert args.decay_chance == 0.02
        assert args.rebranch_chance == 0.12


class TestMain:
    def test_single_strike(self, tmp_path, capsys):
        out = tmp_path / "bolt.png"
        main(["-o", str(out), "--width", "120", "--height", "90", "--seed", "1", "--json"])
        assert out.exists()
        with Image.open(out) as img:
            assert img.size == (120, 90)
        meta = json.loads(out.with_suffix(".json").read_text())
        assert meta["didStrike"] is True
        assert "shakeIntensity" in capsys.readouterr().out

    def test_multiple_strikes_numbered(self, tmp_path):
        out = tmp_path / "bolt.png"
        main(["-o", str(out), "--width", "80", "--height", "60", "-n", "2", "--sky"])
        assert (tmp_path / "bolt_000.png").exists()
        assert (tmp_path / "bolt_001.png").exists()
        with Image.open(tmp_path / "bolt_000.png") as img:
            assert img.mode == "RGB"

    def test_empty_canvas_rejected(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["-o", str(tmp_path / "bolt.png"), "--width", "0"])
        assert exc.value.code == 1
        assert "Error" in capsys.readouterr().err

    def test_bad_count_rejected(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            main(["-o", str(tmp_path / "bolt.png"), "--count", "0"])
        assert exc.value.code == 1

"""Tests for session configuration, the command line and logging."""

import dataclasses
import io

import pytest
from vipchip import EmulatorConfig
from vipchip.constants import Fault
from vipchip.logging import EmulatorLogger, build_tqdm_progress_bar

import main


class TestEmulatorConfig:
    """Test EmulatorConfig defaults and validation."""

    def test_defaults(self):
        config = EmulatorConfig().validate()

        assert config.clock_rate == 700
        assert config.scale == 20
        assert config.instructions_per_tick == 11
        assert config.key_wait_stores_index

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"clock_rate": 0},
            {"clock_rate": -60},
            {"clock_rate": 59},
            {"scale": 0},
            {"fg_color": (256, 0, 0)},
            {"bg_color": (0, 0)},
        ],
    )
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ValueError):
            EmulatorConfig(**kwargs).validate()

    def test_as_dict(self):
        config = EmulatorConfig(seed=3)
        values = config.as_dict()

        assert values["seed"] == 3
        assert set(values) == {
            "clock_rate", "scale", "fg_color", "bg_color", "key_wait_stores_index", "seed"
        }

    def test_config_is_immutable(self):
        config = EmulatorConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.scale = 4


class TestCommandLine:
    """Test argument parsing of the frontend."""

    def test_defaults(self):
        args = main.parse_args(["game.ch8"])

        assert args.rom == "game.ch8"
        assert args.scale == 20
        assert args.clock_rate == 700
        assert args.scheme == "classic"
        assert main.resolve_colors(args) == ((0xFF, 0xFF, 0xFF), (0x00, 0x00, 0x00))
        assert not args.legacy_key_wait

    def test_scheme_sets_both_colors(self):
        args = main.parse_args(["game.ch8", "--scheme", "amber"])

        assert main.resolve_colors(args) == ((255, 176, 0), (0, 0, 0))

    def test_explicit_color_overrides_scheme(self):
        args = main.parse_args(["game.ch8", "--scheme", "blue", "--fg", "#FF0000"])

        assert main.resolve_colors(args) == ((0xFF, 0x00, 0x00), (0, 0, 64))

    def test_unknown_scheme_exits(self):
        with pytest.raises(SystemExit):
            main.parse_args(["game.ch8", "--scheme", "sepia"])

    def test_colors_and_flags(self):
        args = main.parse_args([
            "game.ch8", "--fg", "0x33FF66FF", "--bg", "#101010",
            "--clock-rate", "540", "--scale", "10", "--legacy-key-wait",
        ])

        assert args.fg == (0x33, 0xFF, 0x66)
        assert args.bg == (0x10, 0x10, 0x10)
        assert args.clock_rate == 540
        assert args.scale == 10
        assert args.legacy_key_wait

    def test_bad_color_exits(self):
        with pytest.raises(SystemExit):
            main.parse_args(["game.ch8", "--fg", "purple"])

    def test_missing_rom_fails_cleanly(self, tmp_path, capsys):
        status = main.main([str(tmp_path / "missing.ch8")])

        assert status == 1
        assert "could not read ROM" in capsys.readouterr().out

    def test_invalid_clock_rate_fails_cleanly(self, tmp_path, capsys):
        rom = tmp_path / "rom.ch8"
        rom.write_bytes(b"\x12\x00")

        status = main.main([str(rom), "--clock-rate", "30"])

        assert status == 1
        assert "Invalid configuration" in capsys.readouterr().out


class TestLogging:
    """Test the console and session loggers."""

    def test_level_filtering(self, capsys):
        logger = EmulatorLogger(log_level="WARNING", use_colors=False, show_timestamps=False)

        logger.info("hidden")
        logger.warning("shown")

        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "[ WARNING][vipchip] shown" in out

    def test_set_level(self, quiet_logger, capsys):
        quiet_logger.set_level("error")
        quiet_logger.warning("hidden")

        assert capsys.readouterr().out == ""
        with pytest.raises(ValueError):
            quiet_logger.set_level("LOUD")

    def test_session_start_formats_colors(self, quiet_logger, capsys):
        quiet_logger.log_session_start({"fg_color": (0xFF, 0x80, 0x00), "clock_rate": 700})

        out = capsys.readouterr().out
        assert "fg_color: #FF8000" in out
        assert "clock_rate: 700" in out

    def test_log_fault(self, quiet_logger, capsys):
        quiet_logger.log_fault(Fault.STACK_OVERFLOW, 0x2F0)

        assert "[CRITICAL][vipchip] FATAL: stack overflow at PC 0x2F0" in capsys.readouterr().out

    def test_progress_bar(self):
        bar = build_tqdm_progress_bar(10, file=io.StringIO(), unit="ignored")

        assert bar.total == 10
        assert bar.unit == "tick"
        bar.close()

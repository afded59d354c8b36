"""Tests for the command-line workflow."""

import sys
from datetime import datetime
from pathlib import Path

import pytest
import pytz

from lightpaper import main
from lightpaper.config import Config, Location, Wallpaper
from lightpaper.during import AnyTime, Lights
from lightpaper.errors import NoMatchError, SolarComputationError
from lightpaper.light import Light
from lightpaper.sun_calculator import SolarPosition

NOON = datetime(2024, 6, 21, 12, 0, tzinfo=pytz.utc)


class FakeSunCalculator:
    """Stands in for SunCalculator with a fixed position."""

    def __init__(self, *args, position=None, **kwargs):
        self.position = position or SolarPosition(zenith_angle=60.0, azimuth=120.0)
        self.tz = pytz.utc

    def as_aware(self, when=None):
        return when or NOON

    def get_position(self, when=None):
        return self.position


class FakeManager:

    def __init__(self, result=True):
        self.result = result
        self.paths = []

    def set_wallpaper(self, path):
        self.paths.append(path)
        return self.result


def make_config(*entries):
    return Config(
        location=Location(latitude=51.5, longitude=-0.12),
        wallpapers=[Wallpaper(during=during, path=Path(path)) for path, during in entries],
    )


class TestEvaluate:

    def test_selects_for_position(self):
        config = make_config(
            ("/night.jpg", Lights(lights=frozenset([Light.NIGHT]))),
            ("/day.jpg", Lights(lights=frozenset([Light.DAY]))),
        )
        selection = main.evaluate(config, FakeSunCalculator())

        assert selection.when == NOON
        assert selection.light is Light.DAY
        assert selection.position.elevation == pytest.approx(30.0)
        assert selection.wallpaper.path == Path("/day.jpg")

    def test_no_match_propagates(self):
        config = make_config(("/night.jpg", Lights(lights=frozenset([Light.NIGHT]))))
        with pytest.raises(NoMatchError):
            main.evaluate(config, FakeSunCalculator())


class TestRunOnce:

    def test_applies_selected_wallpaper(self, monkeypatch):
        manager = FakeManager()
        monkeypatch.setattr(main, "SunCalculator", FakeSunCalculator)
        monkeypatch.setattr(main, "create_wallpaper_manager", lambda method: manager)

        config = make_config(("/default.jpg", AnyTime()))
        assert main.run_once(config) == 0
        assert manager.paths == [Path("/default.jpg")]

    def test_backend_failure(self, monkeypatch):
        monkeypatch.setattr(main, "SunCalculator", FakeSunCalculator)
        monkeypatch.setattr(main, "create_wallpaper_manager", lambda method: FakeManager(False))

        assert main.run_once(make_config(("/default.jpg", AnyTime()))) == 1


class TestOutput:

    def test_run_test(self, monkeypatch, capsys):
        monkeypatch.setattr(main, "SunCalculator", FakeSunCalculator)
        main.run_test(make_config(("/default.jpg", AnyTime())))

        out = capsys.readouterr().out
        assert "Light:      day" in out
        assert "rising" in out
        assert "/default.jpg" in out

    def test_run_test_without_match(self, monkeypatch, capsys):
        monkeypatch.setattr(main, "SunCalculator", FakeSunCalculator)
        main.run_test(make_config(("/night.jpg", Lights(lights=frozenset([Light.NIGHT])))))
        assert "Wallpaper:  none" in capsys.readouterr().out

    def test_show_lights(self, capsys):
        main.show_lights()
        out = capsys.readouterr().out
        assert "civil dawn" in out
        assert "[354, 359.75)" in out
        assert "[359.75, 360) ∪ [0, 180.25)" in out

    def test_parse_time(self):
        assert main.parse_time("2024-06-21T12:00:00+00:00") == NOON


class TestCli:

    def run_cli(self, monkeypatch, *args):
        monkeypatch.setattr(sys, "argv", ["lightpaper", *args])
        with pytest.raises(SystemExit) as exc:
            main.cli()
        return exc.value.code

    def test_missing_config(self, tmp_path, monkeypatch, capsys):
        code = self.run_cli(monkeypatch, "--config", str(tmp_path / "missing.yaml"))
        assert code == 1
        assert "lightpaper init" in capsys.readouterr().err

    def test_invalid_config(self, tmp_path, monkeypatch, capsys):
        path = tmp_path / "config.yaml"
        path.write_text("location: {latitude: 100, longitude: 0}\n")
        assert self.run_cli(monkeypatch, "--config", str(path)) == 1
        assert "Invalid configuration" in capsys.readouterr().err

    def test_solar_error_exits(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        monkeypatch.setattr(main.Config, "load", classmethod(
            lambda cls, p: Config.from_dict(
                {"location": {"latitude": 10, "longitude": 0},
                 "wallpapers": [{"during": "any", "path": "/x.jpg"}]},
                validate_paths=False,
            )
        ))

        def fail(*args, **kwargs):
            raise SolarComputationError("no sun")

        monkeypatch.setattr(main, "run_once", fail)
        assert self.run_cli(monkeypatch, "--config", str(path)) == 1

    def test_no_match_exits(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        monkeypatch.setattr(main.Config, "load", classmethod(
            lambda cls, p: Config.from_dict(
                {"location": {"latitude": 10, "longitude": 0},
                 "wallpapers": [{"during": "night", "path": "/x.jpg"}]},
                validate_paths=False,
            )
        ))
        monkeypatch.setattr(main, "SunCalculator", FakeSunCalculator)
        assert self.run_cli(monkeypatch, "--config", str(path), "--time", "2024-06-21T12:00:00") == 1

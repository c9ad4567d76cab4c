"""Tests for the command-line interface."""

import io
import json

import pytest

from batterytray import cli
from batterytray.core.errors import HubConnectError
from batterytray.core.types import PropertyFlag
from conftest import FakeHub


@pytest.fixture(autouse=True)
def xdg(tmp_path, monkeypatch):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))


@pytest.fixture
def fake_hub(monkeypatch):
    hub = FakeHub()
    monkeypatch.setattr(cli, "create_hub", lambda backend: hub)
    return hub


class TestOneShot:

    def test_prints_summary(self, fake_hub, capsys):
        fake_hub.add("a", "Dark Core RGB", value=72)
        fake_hub.add("b", "Virtuoso", value=15)
        assert cli.main([]) == 0
        assert capsys.readouterr().out == "Dark Core RGB: 72%\nVirtuoso: 15%\n"
        assert fake_hub.closed is True

    def test_json(self, fake_hub, capsys):
        fake_hub.add("a", "Mouse", value=72)
        fake_hub.add("k", "Keyboard", flags=PropertyFlag.NONE)
        assert cli.main(["--json"]) == 0
        assert json.loads(capsys.readouterr().out) == [
            {"id": "a", "name": "Mouse", "battery_percent": 72},
        ]

    def test_list(self, fake_hub, capsys):
        fake_hub.add("a", "Mouse", value=72)
        assert cli.main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "Found 1 device(s)" in out
        assert "Battery: 72%" in out

    def test_connect_failure_exits_1(self, fake_hub, capsys):
        fake_hub.connect_error = HubConnectError("no daemon")
        assert cli.main([]) == 1
        assert capsys.readouterr().out == ""

    def test_no_devices_exits_1(self, fake_hub):
        assert cli.main([]) == 1

    def test_unknown_backend_in_config(self, monkeypatch):
        def unknown(backend):
            raise ValueError(f"Unknown hub backend {backend!r}")

        monkeypatch.setattr(cli, "create_hub", unknown)
        assert cli.main([]) == 1


class TestIntervalOption:

    @pytest.fixture
    def intervals(self, monkeypatch):
        seen = []

        class RecordingMonitor(cli.BatteryMonitor):
            def __init__(self, hub, sink, interval=1.0, connect_timeout=10.0):
                seen.append(interval)
                super().__init__(hub, sink, interval=interval, connect_timeout=connect_timeout)

        monkeypatch.setattr(cli, "BatteryMonitor", RecordingMonitor)
        return seen

    @pytest.mark.parametrize("value", ["0", "-1", "-0.5"])
    def test_rejects_non_positive(self, fake_hub, capsys, value):
        with pytest.raises(SystemExit) as exc:
            cli.main(["--interval", value])
        assert exc.value.code == 2
        assert "--interval must be a positive number" in capsys.readouterr().err

    def test_explicit_value_used(self, fake_hub, intervals):
        fake_hub.add("a", "Mouse", value=72)
        assert cli.main(["--interval", "0.5"]) == 0
        assert intervals == [0.5]

    def test_defaults_to_config(self, fake_hub, intervals):
        fake_hub.add("a", "Mouse", value=72)
        assert cli.main([]) == 0
        assert intervals == [1.0]


class TestConsoleSink:

    def test_writes_text(self):
        stream = io.StringIO()
        assert cli.ConsoleSink(stream).set_text("A: 1%") is True
        assert stream.getvalue() == "A: 1%\n"

    def test_blank_line(self):
        stream = io.StringIO()
        cli.ConsoleSink(stream, blank_line=True).set_text("A: 1%")
        assert stream.getvalue() == "A: 1%\n\n"

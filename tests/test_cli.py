"""Tests for the command line entry point."""
import json
import os
import sys

import pytest

parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.append(parent_dir)

import main  # noqa: E402


@pytest.fixture
def workspace(tmp_path, monkeypatch, layout_dict):
    monkeypatch.chdir(tmp_path)
    layout = tmp_path / "layout.json"
    layout.write_text(json.dumps(layout_dict))
    return tmp_path


def _write_config(path, **routing):
    path.write_text(json.dumps({"routing": routing, "logging": {"level": "WARNING"}}))
    return str(path)


class TestRouteCommand:
    """cellroute route"""

    def test_success(self, workspace, capsys):
        config = _write_config(workspace / "cellroute.json", layers=["metal1", "metal2"])
        output = workspace / "routes.json"

        code = main.main(["route", str(workspace / "layout.json"), "-o", str(output), "-c", config])

        assert code == main.EXIT_OK
        assert "Routed 1/1 nets" in capsys.readouterr().out
        assert json.loads(output.read_text())["routes"][0]["net_id"] == "n1"

    def test_unrouted_net(self, workspace, capsys):
        config = _write_config(workspace / "cellroute.json", layers=["metal1", "metal2"],
                               max_iterations=1)

        code = main.main(["route", str(workspace / "layout.json"), "-c", config])

        assert code == main.EXIT_UNROUTED
        assert "ERROR: Failed to route net a_to_b" in capsys.readouterr().out

    def test_missing_layout(self, workspace):
        config = _write_config(workspace / "cellroute.json")
        assert main.main(["route", str(workspace / "nope.json"), "-c", config]) == main.EXIT_INPUT_ERROR

    def test_invalid_routing_settings(self, workspace):
        config = _write_config(workspace / "cellroute.json", grid_size=-1)
        assert main.main(["route", str(workspace / "layout.json"), "-c", config]) == main.EXIT_INPUT_ERROR

    def test_unknown_layer_in_net(self, workspace, layout_dict):
        # Default settings route on metal1..metal3; the net asks for metal4
        data = dict(layout_dict)
        data["nets"][0]["preferredLayer"] = "metal4"
        (workspace / "layout.json").write_text(json.dumps(data))
        config = _write_config(workspace / "cellroute.json")

        assert main.main(["route", str(workspace / "layout.json"), "-c", config]) == main.EXIT_INPUT_ERROR

    def test_non_numeric_setting(self, workspace):
        config = _write_config(workspace / "cellroute.json", grid_size="20")

        assert main.main(["route", str(workspace / "layout.json"), "-c", config]) == main.EXIT_INPUT_ERROR

    def test_bad_log_level_falls_back(self, workspace):
        config = workspace / "cellroute.json"
        config.write_text(json.dumps({"routing": {"layers": ["metal1", "metal2"]},
                                      "logging": {"level": "LOUD"}}))

        assert main.main(["route", str(workspace / "layout.json"), "-c", str(config)]) == main.EXIT_OK


class TestCheckConfigCommand:
    """cellroute check-config"""

    def test_valid(self, workspace, capsys):
        config = _write_config(workspace / "cellroute.json")

        assert main.main(["check-config", "-c", config]) == main.EXIT_OK
        assert "Configuration OK" in capsys.readouterr().out

    def test_invalid(self, workspace, capsys):
        config = _write_config(workspace / "cellroute.json", preferred_direction="diagonal")

        assert main.main(["check-config", "-c", config]) == main.EXIT_INPUT_ERROR
        assert "routing: preferred_direction" in capsys.readouterr().out

    def test_non_numeric_setting(self, workspace, capsys):
        config = _write_config(workspace / "cellroute.json", grid_size="20", max_bends="many")

        assert main.main(["check-config", "-c", config]) == main.EXIT_INPUT_ERROR
        out = capsys.readouterr().out
        assert "routing: grid_size must be numeric, got str" in out
        assert "routing: max_bends must be an integer, got str" in out


def test_no_command_prints_help(capsys):
    assert main.main([]) == main.EXIT_INPUT_ERROR
    assert "usage" in capsys.readouterr().out

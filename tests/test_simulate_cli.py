import pytest

from tools.presets import PRESETS, get_preset_config, get_preset_list, parse_number, split_preset
from tools.simulate import format_time, main


@pytest.mark.parametrize("value, expected", [
    ("9000", 9000),
    ("20k", 20_000),
    ("1.5K", 1500),
    ("2m", 2_000_000),
])
def test_parse_number(value, expected):
    assert parse_number(value) == expected


def test_parse_number_rejects_garbage():
    with pytest.raises(ValueError):
        parse_number("lots")


def test_format_time():
    assert format_time(0.25, short=True) == "250ms"
    assert format_time(12.0) == "12s"
    assert format_time(120.0) == "2.0m"
    assert format_time(7200.0) == "2.0h"


def test_presets_are_valid_params():
    from accretion import SimulationParams

    for key, preset in get_preset_list():
        params, run = split_preset(get_preset_config(key))
        SimulationParams.from_dict(params)
        assert run["total_frames"] > 0
        assert run["session_name"] == key


def test_unknown_preset_config():
    assert get_preset_config("nope") is None


def test_list(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    for key in PRESETS:
        assert key in out


def test_run_preset(capsys):
    code = main(["--preset", "tiny_cloud", "--frames", "4", "--seed", "1", "--report-every", "2"])
    out = capsys.readouterr().out

    assert code == 0
    assert "[Simulate] Using preset: Tiny Cloud" in out
    assert "Frame    2/4" in out
    assert "Frame    4/4" in out
    assert "Particles:" in out
    assert "Total mass: 500" in out


def test_run_with_overrides(capsys):
    code = main(["--bodies", "300", "--frames", "2", "--backend", "grid",
                 "--dt", "0.05", "--seed", "3", "--report-every", "0"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Override: 300 particles" in out
    assert "backend: grid" in out
    assert "Total mass: 300" in out
    assert "Frame" not in out


def test_unknown_preset_exit_code(capsys):
    assert main(["--preset", "nope"]) == 2
    assert "Unknown preset" in capsys.readouterr().out


def test_invalid_config_reported(capsys):
    assert main(["--bodies", "-5", "--frames", "1"]) == 2
    assert "[Simulate] Error:" in capsys.readouterr().out


def test_invalid_bodies_value(capsys):
    assert main(["--bodies", "many"]) == 2
    assert "Invalid bodies value" in capsys.readouterr().out


def test_preset_by_index(capsys):
    code = main(["--preset-id", "0", "--frames", "1", "--seed", "2", "--report-every", "0"])
    out = capsys.readouterr().out

    assert code == 0
    assert "Using preset [0]: Tiny Cloud" in out


def test_preset_index_out_of_range(capsys):
    assert main(["--preset-id", "99"]) == 2
    assert "Invalid preset index" in capsys.readouterr().out

import pytest

import estimate_pi
from device import DeviceInfo
from errors import DeviceFailure, InvalidInput


@pytest.fixture
def no_dispatch(monkeypatch):
    def fail(*args, **kwargs):
        raise AssertionError("dispatch must not happen")

    monkeypatch.setattr(estimate_pi, "monte_carlo_operation", fail)


@pytest.mark.parametrize("arg", ["abc", "-5", "1.5", str(2**64), "1_000", " 7 ", "\u0667", ""])
def test_invalid_argument_exits_1(arg, no_dispatch, capsys):
    assert estimate_pi.main([arg]) == 1

    assert "sample count" in capsys.readouterr().err


def test_too_many_arguments(no_dispatch, capsys):
    assert estimate_pi.main(["1", "2"]) == 1

    assert "Usage" in capsys.readouterr().err


def test_parse_sample_count():
    assert estimate_pi.parse_sample_count("1000000") == 1_000_000
    with pytest.raises(InvalidInput):
        estimate_pi.parse_sample_count("abc")
    with pytest.raises(InvalidInput):
        estimate_pi.parse_sample_count("1_000")


def test_device_failure_exits_1(monkeypatch, capsys):
    def fail(*args, **kwargs):
        raise DeviceFailure("dispatch worker groups", "boom")

    monkeypatch.setattr(estimate_pi, "monte_carlo_operation", fail)

    assert estimate_pi.main(["1000"]) == 1

    assert capsys.readouterr().err.strip() == "error: dispatch worker groups failed: boom"


def test_full_run(monkeypatch, capsys):
    monkeypatch.setattr(estimate_pi, "query_device", lambda: DeviceInfo("test device", 1))

    assert estimate_pi.main(["1000"]) == 0

    out = capsys.readouterr().out
    assert "Device: test device" in out
    assert "Worker groups: 2" in out
    assert "Requested samples: 1000" in out
    assert "Actual samples: 1024" in out
    assert "Pi estimate:" in out

import pytest

from gaze_validation.__main__ import main


@pytest.fixture(autouse=True)
def fast_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GAZE__VALIDATION__SETTLE_S", "0")
    monkeypatch.setenv("GAZE__VALIDATION__POLL_INTERVAL_S", "0.01")


def test_dummy_run_succeeds(capsys):
    assert main(["--dummy", "--sample-count", "10", "--combined"]) == 0

    out = capsys.readouterr().out
    assert "Look at (0.50, 0.50)" in out
    assert "Average: accuracy " in out


def test_bad_sample_count_is_a_configuration_error(capsys):
    assert main(["--dummy", "--sample-count", "5"]) == 1
    assert "Configuration Error" in capsys.readouterr().out

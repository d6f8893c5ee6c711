"""Tests for environment-driven settings."""

from dicebag.config import Settings


def test_summary_output_by_default(monkeypatch) -> None:
    monkeypatch.delenv("DICEBAG_DETAILED", raising=False)
    assert Settings(_env_file=None).detailed is False


def test_detailed_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("DICEBAG_DETAILED", "true")
    assert Settings(_env_file=None).detailed is True

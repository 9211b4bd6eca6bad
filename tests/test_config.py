"""Tests for settings validation."""

import pytest
from pydantic import ValidationError

from workspace_sync.config import Settings


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.max_follow_ups == 3
    assert settings.due_date_spacing_days == 2
    assert settings.metrics_timezone == "UTC"


@pytest.mark.parametrize("limit", [0, 4, 10])
def test_follow_up_limit_cannot_exceed_branch_cap(limit):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, max_follow_ups=limit)


def test_follow_up_limit_from_environment(monkeypatch):
    monkeypatch.setenv("WORKSPACE_SYNC_MAX_FOLLOW_UPS", "2")

    assert Settings(_env_file=None).max_follow_ups == 2

    monkeypatch.setenv("WORKSPACE_SYNC_MAX_FOLLOW_UPS", "5")
    with pytest.raises(ValidationError):
        Settings(_env_file=None)

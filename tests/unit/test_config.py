"""Tests for configuration validation."""

import pytest
from pydantic import ValidationError

from kidstreak.core.config import ResetPolicy, Settings


def test_defaults() -> None:
    """Test the calendar day is Chicago and resets deactivate tasks by default."""
    settings = Settings(_env_file=None)

    assert settings.timezone == "America/Chicago"
    assert settings.reset_policy == ResetPolicy.CLEAR_DONE_AND_DEACTIVATE
    assert settings.seed_demo_data is True


def test_unknown_timezone_is_rejected() -> None:
    """Test an unknown IANA zone fails validation."""
    with pytest.raises(ValidationError, match="Unknown timezone"):
        Settings(timezone="Atlantis/Capital")


def test_reset_policy_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test the reset policy is read from RESET_POLICY."""
    monkeypatch.setenv("RESET_POLICY", "clear_done")

    assert Settings().reset_policy == ResetPolicy.CLEAR_DONE


def test_invalid_reset_policy_is_rejected() -> None:
    """Test a reset policy outside the known values fails validation."""
    with pytest.raises(ValidationError):
        Settings(reset_policy="wipe_everything")


@pytest.mark.parametrize(("password", "expected"), [(None, False), ("", False), ("hunter2", True)])
def test_auth_enabled(password: str | None, expected: bool) -> None:
    """Test auth is only enforced when a password is set."""
    assert Settings(app_password=password).auth_enabled is expected

import pytest
from pydantic import ValidationError

from pageguard.config import Settings
from pageguard.core.findings import Sensitivity


def test_sensitivity_is_parsed_at_startup():
    assert Settings(NOTIFICATION_SENSITIVITY="high+").NOTIFICATION_SENSITIVITY == Sensitivity.HIGH_PLUS


def test_unknown_sensitivity_is_rejected_at_startup():
    with pytest.raises(ValidationError):
        Settings(NOTIFICATION_SENSITIVITY="loud")


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.NOTIFICATION_SENSITIVITY == Sensitivity.ALL
    assert settings.HISTORY_CAPACITY == 100
    assert settings.CORS_ORIGINS == []

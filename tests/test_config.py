#!/usr/bin/env python3
"""Tests for environment-driven settings."""
from pathlib import Path

from autocare.config import PROJECT_DIR, Settings


class TestSettingsFromEnv:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.data_dir == PROJECT_DIR / "vehicles"
        assert settings.log_level == "WARNING"
        assert settings.notification_max_age_days == 30

    def test_overrides(self):
        settings = Settings.from_env(
            {
                "AUTOCARE_DATA_DIR": "/tmp/garage",
                "AUTOCARE_LOG_LEVEL": "debug",
                "AUTOCARE_NOTIFICATION_MAX_AGE_DAYS": "7",
                "SECRET_KEY": "s3cret",
            }
        )
        assert settings.data_dir == Path("/tmp/garage")
        assert settings.log_level == "DEBUG"
        assert settings.notification_max_age_days == 7
        assert settings.secret_key == "s3cret"

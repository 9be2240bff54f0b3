"""
Unit tests for config.py
"""
import pytest

from tripcopilot.config import Settings


class TestSettings:

    def test_validate_requires_openai_key(self):
        settings = Settings()
        settings.OPENAI_API_KEY = ""
        with pytest.raises(ValueError, match="OPENAI_API_KEY"):
            settings.validate()

    def test_validate_passes_with_key(self):
        settings = Settings()
        settings.OPENAI_API_KEY = "sk-test"
        settings.validate()

    def test_allowed_origins_list(self):
        settings = Settings()
        settings.ALLOWED_ORIGINS = "http://a.test, http://b.test,,"
        assert settings.allowed_origins_list == ["http://a.test", "http://b.test"]


"""Unit tests for Settings field validators."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from quill.core.config import Settings


class TestValidators:
    def test_log_level_is_uppercased(self) -> None:
        settings = Settings(QUILL_LOG_LEVEL="debug")
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Log level must be one of"):
            Settings(QUILL_LOG_LEVEL="chatty")

    def test_invalid_log_format_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Log format must be one of"):
            Settings(QUILL_LOG_FORMAT="xml")

    def test_environment_is_lowercased(self) -> None:
        settings = Settings(QUILL_ENVIRONMENT="Production")
        assert settings.environment == "production"

    def test_relative_themes_dir_is_resolved(self) -> None:
        settings = Settings(QUILL_THEMES_DIR="content/themes")
        assert Path(settings.themes_dir).is_absolute()

    def test_absolute_themes_dir_kept(self, tmp_path) -> None:
        settings = Settings(QUILL_THEMES_DIR=str(tmp_path))
        assert settings.themes_dir == str(tmp_path)

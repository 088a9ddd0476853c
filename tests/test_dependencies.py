"""Tests for settings and productivity service wiring."""

import pytest
from unittest.mock import MagicMock

from app.config import Settings
from app.productivity.dependencies import (
    create_productivity_service,
    create_score_cache,
    get_productivity_service,
)
from app.productivity.services.data_sources import MongoActivityDataSource
from app.productivity.services.productivity_service import ProductivityService
from app.productivity.services.score_cache import InMemoryScoreCache, MongoScoreCache


@pytest.fixture
def mock_db():
    db = MagicMock()
    db.__getitem__.return_value = MagicMock()
    return db


class TestCreateScoreCache:
    def test_memory_backend(self):
        cache = create_score_cache(Settings(PRODUCTIVITY_CACHE_BACKEND="memory"))

        assert isinstance(cache, InMemoryScoreCache)

    def test_mongo_backend(self):
        cache = create_score_cache(Settings(PRODUCTIVITY_CACHE_BACKEND="Mongo"))

        assert isinstance(cache, MongoScoreCache)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="redis"):
            create_score_cache(Settings(PRODUCTIVITY_CACHE_BACKEND="redis"))


class TestCreateProductivityService:
    def test_builds_mongo_backed_service(self, mock_db):
        service = create_productivity_service(
            mock_db, Settings(PRODUCTIVITY_HISTORY_MONTHS=6)
        )

        assert isinstance(service, ProductivityService)
        assert isinstance(service._aggregator._data_source, MongoActivityDataSource)
        assert service._history_months == 6

    def test_service_is_read_from_app_state(self):
        service = MagicMock(spec=ProductivityService)
        request = MagicMock()
        request.app.state.productivity_service = service

        assert get_productivity_service(request) is service


class TestSettingsValidation:
    def test_defaults_are_valid(self):
        Settings().validate_required()

    def test_invalid_productivity_settings(self):
        settings = Settings(
            PRODUCTIVITY_CACHE_BACKEND="redis",
            PRODUCTIVITY_CACHE_TTL_SECONDS=-5,
            PRODUCTIVITY_HISTORY_MONTHS=48,
        )

        with pytest.raises(ValueError) as exc_info:
            settings.validate_required()

        message = str(exc_info.value)
        assert "PRODUCTIVITY_CACHE_BACKEND must be one of memory, mongo" in message
        assert "PRODUCTIVITY_CACHE_TTL_SECONDS cannot be negative" in message
        assert "PRODUCTIVITY_HISTORY_MONTHS must be between 1 and 36" in message

    def test_missing_database_name(self):
        with pytest.raises(ValueError, match="MONGODB_DATABASE is required"):
            Settings(MONGODB_DATABASE="").validate_required()

"""
Test fixtures for the NEXUS backend.

Provides an in-memory creative repository and a FastAPI TestClient
with the repository and override store injected.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from unittest.mock import patch

import pytest

from nexus.errors import PersistenceWriteError, UpstreamReadError
from nexus.models.creative import Creative
from nexus.services.override_store import InMemoryOverrideStore


# ====================
# Mock Repository
# ====================


class FakeCreativeRepository:
    """In-memory stand-in for CreativeRepository"""

    def __init__(self):
        self.creatives: List[Creative] = []
        self.operational_metadata: Optional[Dict[str, Any]] = None
        self.screen_config: Optional[Dict[str, Any]] = None
        self.touched: List[tuple] = []

        self.fail_creatives = False
        self.fail_metadata = False
        self.fail_screen_config = False
        self.fail_touch = False

    def add_creative(self, **fields) -> Creative:
        fields.setdefault("created_at", datetime.now(timezone.utc) + timedelta(seconds=len(self.creatives)))
        creative = Creative(**fields)
        self.creatives.append(creative)
        return creative

    def list_creatives(self) -> List[Creative]:
        if self.fail_creatives:
            raise UpstreamReadError("Failed to read from the creative store")
        return sorted(self.creatives, key=lambda c: c.created_at, reverse=True)

    def find_creative_by_asset_id(self, asset_id: str) -> Optional[Creative]:
        for creative in self.creatives:
            if creative.asset_id == asset_id:
                return creative
        return None

    def get_latest_operational_metadata(self) -> Optional[Dict[str, Any]]:
        if self.fail_metadata:
            raise UpstreamReadError("Failed to read from the creative store")
        return self.operational_metadata

    def get_latest_screen_config(self) -> Optional[Dict[str, Any]]:
        if self.fail_screen_config:
            raise UpstreamReadError("Failed to read from the creative store")
        return self.screen_config

    def touch_creative(self, campaign_run: str, patch: Dict[str, Any]) -> bool:
        if self.fail_touch:
            raise PersistenceWriteError(f"Failed to touch creatives for {campaign_run}: read only")
        self.touched.append((campaign_run, patch))
        return True


@pytest.fixture
def repository():
    """Fresh fake repository for each test"""
    return FakeCreativeRepository()


@pytest.fixture
def store():
    """Fresh override store for each test"""
    return InMemoryOverrideStore()


@pytest.fixture
def client(repository, store):
    """FastAPI test client with the repository and store injected"""
    from fastapi.testclient import TestClient

    from nexus.main import app
    from nexus.services.creative_repository import get_creative_repository
    from nexus.services.override_store import get_override_store

    app.dependency_overrides[get_creative_repository] = lambda: repository
    app.dependency_overrides[get_override_store] = lambda: store

    with patch("nexus.main.missing_credentials", return_value=[]), patch("nexus.main.invalid_settings", return_value=[]):
        with TestClient(app) as test_client:
            yield test_client

    app.dependency_overrides = {}

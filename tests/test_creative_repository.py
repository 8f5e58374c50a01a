"""
Unit tests for CreativeRepository with a mocked psycopg2 connection
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import psycopg2
import pytest

from nexus.errors import PersistenceWriteError, UpstreamReadError
from nexus.services.creative_repository import CreativeRepository


def _connection(rows=None, row=None, execute_error=None):
    cursor = MagicMock()
    cursor.fetchall.return_value = rows or []
    cursor.fetchone.return_value = row
    if execute_error is not None:
        cursor.execute.side_effect = execute_error
    conn = MagicMock()
    conn.cursor.return_value = cursor
    return conn, cursor


class TestReads:
    """Tests for the read operations"""

    def test_list_creatives_maps_rows(self):
        conn, _ = _connection(
            rows=[
                {"asset_id": "a-2", "campaign_run": "run-2", "duration": 5000, "type": "image", "extra": 1},
                {"asset_id": "a-1", "campaign_run": "run-1", "duration": None, "type": "video"},
            ]
        )

        creatives = CreativeRepository(lambda: conn).list_creatives()

        assert [c.asset_id for c in creatives] == ["a-2", "a-1"]
        assert creatives[1].duration == 0
        conn.close.assert_called_once()

    def test_find_creative_missing(self):
        conn, cursor = _connection(row=None)

        assert CreativeRepository(lambda: conn).find_creative_by_asset_id("nope") is None
        assert cursor.execute.call_args[0][1] == ("nope",)

    def test_latest_metadata(self):
        conn, _ = _connection(row={"device_uuid": "dev-1"})

        assert CreativeRepository(lambda: conn).get_latest_operational_metadata() == {"device_uuid": "dev-1"}

    def test_latest_screen_config_missing(self):
        conn, _ = _connection(row=None)

        assert CreativeRepository(lambda: conn).get_latest_screen_config() is None

    def test_query_error_becomes_upstream_error(self):
        conn, _ = _connection(execute_error=psycopg2.OperationalError("timeout"))

        with pytest.raises(UpstreamReadError):
            CreativeRepository(lambda: conn).list_creatives()
        conn.close.assert_called_once()

    def test_connect_error_becomes_upstream_error(self):
        def refuse():
            raise psycopg2.OperationalError("connection refused")

        with pytest.raises(UpstreamReadError):
            CreativeRepository(refuse).get_latest_operational_metadata()


class TestTouchCreative:
    """Tests for the single-attempt write"""

    def test_updates_and_commits(self):
        conn, cursor = _connection()
        now = datetime.now(timezone.utc)

        assert CreativeRepository(lambda: conn).touch_creative("run-1", {"updated_at": now}) is True

        params = cursor.execute.call_args[0][1]
        assert params == (now, "run-1")
        conn.commit.assert_called_once()

    def test_campaign_data_is_sent_as_json(self):
        conn, cursor = _connection()

        CreativeRepository(lambda: conn).touch_creative("run-1", {"updated_at": 1, "campaign_data": {"muted": True}})

        params = cursor.execute.call_args[0][1]
        assert params[0] == 1
        assert params[1].adapted == {"muted": True}
        assert params[2] == "run-1"

    def test_unknown_columns_are_ignored(self):
        conn, cursor = _connection()

        assert CreativeRepository(lambda: conn).touch_creative("run-1", {"asset_id": "x"}) is False
        cursor.execute.assert_not_called()

    def test_write_error_raises_persistence_error(self):
        conn, _ = _connection(execute_error=psycopg2.OperationalError("read only"))

        with pytest.raises(PersistenceWriteError) as excinfo:
            CreativeRepository(lambda: conn).touch_creative("run-1", {"updated_at": 1})

        assert "run-1" in excinfo.value.message
        conn.commit.assert_not_called()
        conn.close.assert_called_once()

# backend/nexus/services/creative_repository.py
import logging
from typing import Any, Callable, Dict, List, Optional

import psycopg2
from psycopg2 import sql
from psycopg2.extras import Json, RealDictCursor

from nexus.config import get_db_connection
from nexus.errors import PersistenceWriteError, UpstreamReadError
from nexus.models.creative import Creative

logger = logging.getLogger(__name__)

# Μόνο αυτές οι στήλες αλλάζουν από το touch_creative
TOUCHABLE_COLUMNS = ("updated_at", "campaign_data")


class CreativeRepository:
    """
    Read-only (σχεδόν) πρόσβαση στους πίνακες creatives,
    operational_metadata και screen_config.

    Κάθε κλήση ανοίγει δική της σύνδεση, μία προσπάθεια, χωρίς retry.
    Τα timeouts ορίζονται στο get_db_connection.
    """

    def __init__(self, connection_factory: Callable[[], Any] = get_db_connection) -> None:
        self._connect = connection_factory

    def _fetch(self, query: str, params: tuple = (), many: bool = True):
        conn = None
        try:
            conn = self._connect()
            cur = conn.cursor(cursor_factory=RealDictCursor)
            cur.execute(query, params)
            rows = cur.fetchall() if many else cur.fetchone()
            cur.close()
            return rows
        except psycopg2.Error as exc:
            logger.error("Database read failed: %s", exc)
            raise UpstreamReadError("Failed to read from the creative store") from exc
        finally:
            if conn is not None:
                conn.close()

    def list_creatives(self) -> List[Creative]:
        """
        Επιστρέφει ΟΛΑ τα creatives, νεότερα πρώτα.
        Η σειρά είναι μέρος του συμβολαίου (έτσι παίζει το playlist).
        """
        rows = self._fetch(
            """
            SELECT *
            FROM creatives
            ORDER BY created_at DESC;
            """
        )
        return [Creative(**row) for row in rows]

    def find_creative_by_asset_id(self, asset_id: str) -> Optional[Creative]:
        row = self._fetch(
            """
            SELECT *
            FROM creatives
            WHERE asset_id = %s
            LIMIT 1;
            """,
            (asset_id,),
            many=False,
        )
        if row is None:
            return None
        return Creative(**row)

    def get_latest_operational_metadata(self) -> Optional[Dict[str, Any]]:
        row = self._fetch(
            """
            SELECT *
            FROM operational_metadata
            ORDER BY created_at DESC
            LIMIT 1;
            """,
            many=False,
        )
        return dict(row) if row is not None else None

    def get_latest_screen_config(self) -> Optional[Dict[str, Any]]:
        row = self._fetch(
            """
            SELECT *
            FROM screen_config
            ORDER BY created_at DESC
            LIMIT 1;
            """,
            many=False,
        )
        return dict(row) if row is not None else None

    def touch_creative(self, campaign_run: str, patch: Dict[str, Any]) -> bool:
        """
        Update των creatives ενός campaign run, μία προσπάθεια.
        Σηκώνει PersistenceWriteError αν αποτύχει η εγγραφή.
        Γυρνάει False όταν το patch δεν έχει καμία γνωστή στήλη.
        """
        columns = [c for c in TOUCHABLE_COLUMNS if c in patch]
        if not columns:
            return False

        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in columns
        )
        query = sql.SQL("UPDATE creatives SET {} WHERE campaign_run = %s").format(assignments)
        params = [Json(patch[c]) if c == "campaign_data" else patch[c] for c in columns]
        params.append(campaign_run)

        conn = None
        try:
            conn = self._connect()
            cur = conn.cursor()
            cur.execute(query, tuple(params))
            conn.commit()
            cur.close()
            return True
        except psycopg2.Error as exc:
            raise PersistenceWriteError(f"Failed to touch creatives for {campaign_run}: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()


# SINGLETON
_REPOSITORY: CreativeRepository | None = None


def get_creative_repository() -> CreativeRepository:
    global _REPOSITORY
    if _REPOSITORY is None:
        _REPOSITORY = CreativeRepository()
    return _REPOSITORY

# backend/nexus/services/campaign_update_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from nexus.config import CAMPAIGN_DATA_SOURCE, MERGE_MAX_DEPTH
from nexus.errors import ClientInputError, MergeDepthError, PersistenceWriteError
from nexus.models.content_plan_models import CampaignUpdateResponse
from nexus.services.content_plan_service import CampaignDataSource
from nexus.services.creative_repository import CreativeRepository
from nexus.services.merge import payload_depth
from nexus.services.override_store import OverrideStore

logger = logging.getLogger(__name__)


class CampaignUpdateService:
    """
    Αποθηκεύει το override ενός campaign run.

    - OVERRIDE mode: στη μνήμη (OverrideStore) + update του updated_at στη βάση
    - INLINE mode: το payload γράφεται κατευθείαν στο creatives.campaign_data

    Η εγγραφή στη βάση είναι best-effort: αν αποτύχει,
    το update θεωρείται πετυχημένο.
    """

    def __init__(
        self,
        repository: CreativeRepository,
        store: OverrideStore,
        source: CampaignDataSource | str = CAMPAIGN_DATA_SOURCE,
        max_depth: int = MERGE_MAX_DEPTH,
    ) -> None:
        self._repository = repository
        self._store = store
        self._source = CampaignDataSource(source)
        self._max_depth = max_depth

    def update(self, campaign_run: str | None, payload: Any) -> CampaignUpdateResponse:
        if not campaign_run or not campaign_run.strip():
            raise ClientInputError("Campaign run is required")
        if payload is None:
            # χωρίς body = κενό override
            payload = {}
        if not isinstance(payload, dict):
            raise ClientInputError("Campaign data must be a JSON object")
        if payload_depth(payload) > self._max_depth:
            raise MergeDepthError(f"Campaign data is nested deeper than {self._max_depth} levels")

        logger.info("Campaign data updated for %s: %s", campaign_run, payload)

        patch: Dict[str, Any] = {"updated_at": datetime.now(timezone.utc)}
        if self._source == CampaignDataSource.INLINE:
            patch["campaign_data"] = payload
        else:
            self._store.put(campaign_run, payload)

        try:
            self._repository.touch_creative(campaign_run, patch)
        except PersistenceWriteError as exc:
            logger.warning("Update for %s not persisted: %s", campaign_run, exc.message)

        return CampaignUpdateResponse(
            message="Campaign data updated successfully",
            campaign_run=campaign_run,
            campaign_data=payload,
        )

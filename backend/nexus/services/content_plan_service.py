# backend/nexus/services/content_plan_service.py
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from nexus.config import CAMPAIGN_DATA_SOURCE
from nexus.errors import UpstreamReadError
from nexus.models.content_plan_models import (
    AmbientAudioSettings,
    ContentPlan,
    PublisherContentEntry,
    VistarConfig,
)
from nexus.models.creative import Creative
from nexus.models.metadata_models import NumericFallback
from nexus.services.campaign_config_service import CampaignConfigService
from nexus.services.creative_repository import CreativeRepository
from nexus.services.metadata_service import coerce_number, parse_custom_fields
from nexus.services.override_store import OverrideStore

logger = logging.getLogger(__name__)

DEFAULT_AMBIENT_VOLUME = 0.5


class CampaignDataSource(str, Enum):
    """
    Από πού βγαίνει το campaign_data κάθε campaign run.
    - OVERRIDE: default config + override από το OverrideStore (deep merge)
    - INLINE: το campaign_data που είναι αποθηκευμένο πάνω στο creative
    """
    OVERRIDE = "override"
    INLINE = "inline"


def build_ambient_audio_settings(record: Optional[Dict[str, Any]]) -> Optional[AmbientAudioSettings]:
    """
    Ambient audio ενεργό μόνο αν:
    - custom_fields.ambient_audio_enabled είναι ρητά true
    - υπάρχει μη κενό ambient_url
    Η ένταση πέφτει στο 0.5 όταν λείπει ή δεν είναι αριθμός.
    """
    if not record:
        return None

    custom = parse_custom_fields(record.get("custom_fields"))
    ambient_url = record.get("ambient_url")
    if not custom.is_enabled("ambient_audio_enabled") or not ambient_url:
        return None

    volume = coerce_number(record.get("ambient_audio_vol"), NumericFallback.NULL)
    return AmbientAudioSettings(
        enabled=True,
        ambient_uuid=record.get("ambient_uuid"),
        ambient_url=ambient_url,
        ambient_audio_vol=DEFAULT_AMBIENT_VOLUME if volume is None else float(volume),
    )


def build_publisher_content(creatives: List[Creative]) -> List[PublisherContentEntry]:
    return [
        PublisherContentEntry(campaign_run=c.campaign_run, duration_millis=c.duration)
        for c in creatives
    ]


class ContentPlanService:
    """
    Συναρμολογεί το content plan από τα creatives της βάσης
    και τα overrides της μνήμης. Χτίζεται από την αρχή σε κάθε request.
    """

    def __init__(
        self,
        repository: CreativeRepository,
        store: OverrideStore,
        source: CampaignDataSource | str = CAMPAIGN_DATA_SOURCE,
    ) -> None:
        self._repository = repository
        self._configs = CampaignConfigService(store)
        self._source = CampaignDataSource(source)

    def _load_ambient_audio(self) -> Optional[AmbientAudioSettings]:
        try:
            record = self._repository.get_latest_operational_metadata()
        except UpstreamReadError as exc:
            # όχι fatal: απλά χωρίς ambient audio
            logger.warning("Ambient settings unavailable: %s", exc.message)
            return None
        settings = build_ambient_audio_settings(record)
        logger.info("Ambient audio settings: %s", settings)
        return settings

    def build_campaign_data(self, creatives: List[Creative]) -> Dict[str, Dict[str, Any]]:
        """
        campaign_run -> config. Όταν δύο creatives έχουν το ίδιο
        campaign_run, κρατάμε το τελευταίο της λίστας.
        """
        campaign_data: Dict[str, Dict[str, Any]] = {}
        for creative in creatives:
            if not creative.campaign_run:
                continue

            if self._source == CampaignDataSource.INLINE:
                if creative.campaign_data:
                    campaign_data[creative.campaign_run] = creative.campaign_data
            else:
                campaign_data[creative.campaign_run] = self._configs.resolve(creative)
        return campaign_data

    def build_content_plan(self) -> ContentPlan:
        # 1) Creatives (αν αποτύχει, αποτυγχάνει όλο το request)
        creatives = self._repository.list_creatives()

        # 2) Ambient audio
        ambient = self._load_ambient_audio()

        # 3) Playlist με τη σειρά της βάσης
        publisher_content = build_publisher_content(creatives)

        # 4) Campaign data
        campaign_data = self.build_campaign_data(creatives)

        # 5) Super loop = νέο αντίγραφο, όχι alias
        super_loop = [entry.model_copy() for entry in publisher_content]

        return ContentPlan(
            publisher_content=publisher_content,
            campaign_data=campaign_data,
            campaign_orders=[],
            super_loop=super_loop,
            priority_campaign_orders=[],
            vistar_config=VistarConfig(),
            ambient_audio_settings=ambient,
        )

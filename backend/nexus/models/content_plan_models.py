# backend/nexus/models/content_plan_models.py

from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class PublisherContentEntry(BaseModel):
    """Μία θέση στο playlist: ποιο campaign run και για πόσο."""
    campaign_run: Optional[str] = None
    duration_millis: int


class VistarConfig(BaseModel):
    """Εξωτερικό ad network. Προς το παρόν πάντα απενεργοποιημένο."""
    enabled: bool = False
    base_url: str = ""
    publisher_id: str = ""


class AmbientAudioSettings(BaseModel):
    enabled: bool
    ambient_uuid: Optional[str] = None
    ambient_url: str
    ambient_audio_vol: float


class ContentPlan(BaseModel):
    """
    Ολόκληρο το content plan που κατεβάζει μια οθόνη.

    - publisher_content: playlist με τη σειρά της βάσης (νεότερα πρώτα)
    - campaign_data: campaign_run -> τελικό (merged) config
    - super_loop: ξεχωριστό αντίγραφο του publisher_content
      (ίδια σειρά, ίδιο σχήμα) για συμβατότητα με τους clients
    """
    publisher_content: List[PublisherContentEntry]
    campaign_data: Dict[str, Dict[str, Any]]
    campaign_orders: List[Any] = []
    super_loop: List[PublisherContentEntry]
    priority_campaign_orders: List[Any] = []
    vistar_config: VistarConfig = VistarConfig()
    ambient_audio_settings: Optional[AmbientAudioSettings] = None


class CampaignUpdateResponse(BaseModel):
    message: str
    campaign_run: str
    campaign_data: Dict[str, Any]

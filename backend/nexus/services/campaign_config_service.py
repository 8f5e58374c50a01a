# backend/nexus/services/campaign_config_service.py

from copy import deepcopy
from typing import Any, Dict

from nexus.models.creative import AssetType, Creative
from nexus.services.merge import deep_merge
from nexus.services.override_store import OverrideStore

# -----------------------------
#  DEFAULTS (σταθερές, όχι υπολογισμένες)
# -----------------------------
QR_CODE_DEFAULTS: Dict[str, Any] = {
    "enabled": False,
    "url": "",
    "position": "",
    "size": 0,
}

VAST_PASSTHROUGH_DEFAULTS: Dict[str, Any] = {
    "enabled": False,
    "url": "",
}

ALT_AD_PROVIDER_DEFAULTS: Dict[str, Any] = {
    "enabled": False,
    "provider": "",
    "tag_url": "",
}

OBJECT_FIT_DEFAULT = "cover"


def build_default_config(creative: Creative) -> Dict[str, Any]:
    """
    Φτιάχνει το default config ενός campaign run από ένα creative.

    Total συνάρτηση: δεν αποτυγχάνει ποτέ, ό,τι λείπει παίρνει default.
    Κάθε κλήση γυρνάει καινούργια δομή (δεν μοιράζεται τα nested dicts
    των σταθερών).
    """
    return {
        "asset": {
            "id": creative.asset_id or "",
            "type": creative.type.value,
            "qr_code": deepcopy(QR_CODE_DEFAULTS),
            "show_overlay": False,
            "vast": deepcopy(VAST_PASSTHROUGH_DEFAULTS),
            "alt_ad_provider": deepcopy(ALT_AD_PROVIDER_DEFAULTS),
            "object_fit": OBJECT_FIT_DEFAULT,
        },
        # ώρα της ημέρας -> μερικό override, αρχικά άδειο
        "hour_overrides": {},
        "muted": False,
        "audible": creative.type != AssetType.IMAGE,
    }


class CampaignConfigService:
    """
    Ενώνει το default config με το override που έχει αποθηκευτεί
    για το ίδιο campaign run. Τίποτα δεν κρατιέται σε cache.
    """

    def __init__(self, store: OverrideStore) -> None:
        self._store = store

    def resolve(self, creative: Creative) -> Dict[str, Any]:
        default = build_default_config(creative)
        override = self._store.get(creative.campaign_run or "")
        if not override:
            return default
        return deep_merge(default, override)

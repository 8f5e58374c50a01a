# backend/nexus/models/creative.py
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


class AssetType(str, Enum):
    VIDEO = "video"
    IMAGE = "image"
    OTHER = "other"


class Creative(BaseModel):
    """
    Μοντέλο creative όπως είναι στον πίνακα creatives.

    Όλα τα πεδία έχουν default, ώστε και μισογεμάτες εγγραφές
    να περνάνε validation (το core δεν αποτυγχάνει ποτέ για ένα creative).
    """

    id: Optional[Any] = None
    asset_id: Optional[str] = None
    campaign_run: Optional[str] = None

    # σε milliseconds
    duration: int = 0

    type: AssetType = AssetType.OTHER
    filename: Optional[str] = None
    file_url: Optional[str] = None

    # έτοιμο VAST document, αν υπάρχει το σερβίρουμε αυτούσιο
    vast_xml: Optional[str] = None

    campaign_data: Optional[Dict[str, Any]] = None

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("duration", mode="before")
    @classmethod
    def _coerce_duration(cls, value: Any) -> int:
        try:
            millis = int(value)
        except (TypeError, ValueError):
            return 0
        return max(millis, 0)

    @field_validator("type", mode="before")
    @classmethod
    def _coerce_type(cls, value: Any) -> AssetType:
        try:
            return AssetType(value)
        except ValueError:
            return AssetType.OTHER

    @field_validator("campaign_data", mode="before")
    @classmethod
    def _only_objects(cls, value: Any) -> Optional[Dict[str, Any]]:
        # ό,τι δεν είναι object δεν θεωρείται campaign data
        return value if isinstance(value, dict) else None

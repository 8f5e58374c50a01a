# backend/nexus/services/metadata_service.py
import json
import logging
import math
from typing import Any, Dict, Optional

from nexus.config import CUSTOM_FIELD_PRECEDENCE, NUMERIC_FALLBACK
from nexus.errors import NotFoundError, ParseError
from nexus.models.metadata_models import CustomFields, FieldPrecedence, NumericFallback
from nexus.services.creative_repository import CreativeRepository

logger = logging.getLogger(__name__)

OPERATIONAL_METADATA_FIELDS = (
    "ambient_audio_vol",
    "ambient_url",
    "ambient_uuid",
    "campaign_refresh_period",
    "device_clock_offset_tolerance_millis",
    "device_uuid",
    "feed_entries_to_upload_per_cycle",
    "lemma_operational_config",
    "panel_id",
    "priority_campaign_interval",
    "programmatic_probability",
    "programmatic_probability_hour_wise",
    "programmatic_probability_slot_wise",
    "screen_uuid",
    "server_time_millis",
    "show_aruco_overlay",
    "spot_uuid",
    "timezone_identifier",
)

OPERATIONAL_METADATA_NUMERIC_FIELDS = frozenset(
    {
        "ambient_audio_vol",
        "device_clock_offset_tolerance_millis",
        "programmatic_probability",
        "programmatic_probability_hour_wise",
        "programmatic_probability_slot_wise",
        "server_time_millis",
    }
)

SCREEN_CONFIG_FIELDS = ("animation_config", "screen_config")


def _decode_custom_fields(raw: Any) -> Dict[str, Any]:
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, (str, bytes)):
        try:
            decoded = json.loads(raw)
        except ValueError as exc:
            raise ParseError(f"custom_fields is not valid JSON: {exc}") from exc
        if not isinstance(decoded, dict):
            raise ParseError("custom_fields JSON is not an object")
        return decoded
    raise ParseError(f"custom_fields has unsupported type {type(raw).__name__}")


def parse_custom_fields(raw: Any) -> CustomFields:
    """
    Δέχεται το custom_fields όπως έρχεται από τη βάση:
    - None / κενό -> άδειο
    - dict -> ως έχει
    - κείμενο -> JSON parse

    Αν το parse αποτύχει, γράφουμε log και επιστρέφουμε άδειο.
    Ο client δεν βλέπει ποτέ το σφάλμα.
    """
    if not raw:
        return CustomFields()
    try:
        return CustomFields(values=_decode_custom_fields(raw))
    except ParseError as exc:
        logger.warning("Ignoring custom_fields: %s (raw value: %r)", exc.message, raw)
        return CustomFields()


def coerce_number(value: Any, fallback: NumericFallback) -> Optional[float | int]:
    """
    Μετατρέπει σε αριθμό. Ό,τι δεν είναι πεπερασμένος αριθμός
    γίνεται None ή 0, ανάλογα με το fallback.
    """
    number: Optional[float | int] = None
    if isinstance(value, bool):
        number = int(value)
    elif isinstance(value, (int, float)):
        number = value
    elif value is not None:
        try:
            number = float(str(value).strip())
        except ValueError:
            number = None

    if isinstance(number, float):
        if not math.isfinite(number):
            number = None
        elif number.is_integer() and not isinstance(value, float):
            number = int(number)

    if number is None and fallback == NumericFallback.ZERO:
        return 0
    return number


def reconcile_fields(
    canonical: Dict[str, Any],
    custom: CustomFields,
    precedence: FieldPrecedence = FieldPrecedence.CUSTOM_WINS,
) -> Dict[str, Any]:
    """
    Ενώνει τα canonical πεδία με τα custom fields (shallow).

    Με CUSTOM_WINS ένα custom field με το ίδιο όνομα
    επικαλύπτει το canonical. Με CANONICAL_WINS συμβαίνει το αντίθετο.
    """
    if precedence == FieldPrecedence.CUSTOM_WINS:
        return {**canonical, **custom.values}
    return {**custom.values, **canonical}


def _flatten(
    record: Dict[str, Any],
    fields: tuple,
    numeric_fields: frozenset,
    precedence: FieldPrecedence,
    fallback: NumericFallback,
) -> Dict[str, Any]:
    canonical: Dict[str, Any] = {}
    for name in fields:
        value = record.get(name)
        canonical[name] = coerce_number(value, fallback) if name in numeric_fields else value
    return reconcile_fields(canonical, parse_custom_fields(record.get("custom_fields")), precedence)


def transform_operational_metadata(
    record: Dict[str, Any],
    precedence: Optional[FieldPrecedence] = None,
    fallback: Optional[NumericFallback] = None,
) -> Dict[str, Any]:
    """Χωρίς ρητές επιλογές ισχύουν CUSTOM_FIELD_PRECEDENCE και NUMERIC_FALLBACK."""
    return _flatten(
        record,
        OPERATIONAL_METADATA_FIELDS,
        OPERATIONAL_METADATA_NUMERIC_FIELDS,
        precedence or FieldPrecedence(CUSTOM_FIELD_PRECEDENCE),
        fallback or NumericFallback(NUMERIC_FALLBACK),
    )


def transform_screen_config(
    record: Dict[str, Any],
    precedence: Optional[FieldPrecedence] = None,
) -> Dict[str, Any]:
    return _flatten(
        record,
        SCREEN_CONFIG_FIELDS,
        frozenset(),
        precedence or FieldPrecedence(CUSTOM_FIELD_PRECEDENCE),
        NumericFallback.NULL,
    )


class MetadataService:
    def __init__(self, repository: CreativeRepository) -> None:
        self._repository = repository

    def get_operational_metadata(self) -> Dict[str, Any]:
        record = self._repository.get_latest_operational_metadata()
        if record is None:
            raise NotFoundError("No operational metadata found")
        return transform_operational_metadata(record)

    def get_screen_config(self) -> Dict[str, Any]:
        record = self._repository.get_latest_screen_config()
        if record is None:
            raise NotFoundError("No screen configuration found")
        return transform_screen_config(record)

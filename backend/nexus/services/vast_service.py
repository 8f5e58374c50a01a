# backend/nexus/services/vast_service.py
import logging
from xml.sax.saxutils import escape, quoteattr

from nexus.config import IMPRESSION_BASE_URL
from nexus.errors import ClientInputError, NotFoundError, UpstreamReadError
from nexus.models.creative import AssetType, Creative
from nexus.services.creative_repository import CreativeRepository

logger = logging.getLogger(__name__)

MEDIA_WIDTH = 1080
MEDIA_HEIGHT = 1920

MIME_TYPES = {
    AssetType.VIDEO: "video/mp4",
    AssetType.IMAGE: "image/jpeg",
}
DEFAULT_MIME_TYPE = "text/html"

USAGE_MESSAGE = """Error: Missing required parameter: assetId

Usage: /api/media?assetId=<asset_id>
Example: /api/media?assetId=12345678-1234-1234-1234-123456789abc"""

VAST_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<VAST version="4.0">
  <Ad id={ad_id}>
    <InLine>
      <AdSystem version="1.0">Creative Content Manager</AdSystem>
      <AdTitle>{title}</AdTitle>
      <Impression>{impression}</Impression>
      <Creatives>
        <Creative id={creative_id}>
          <Linear>
            <Duration>{duration}</Duration>
            <MediaFiles>
              <MediaFile delivery="progressive" type={mime_type} width="{width}" height="{height}">
                {media_url}
              </MediaFile>
            </MediaFiles>
          </Linear>
        </Creative>
      </Creatives>
    </InLine>
  </Ad>
</VAST>"""


def format_duration(duration_millis: int) -> str:
    """
    milliseconds -> "HH:MM:SS".
    Οι ώρες δεν κόβονται στο 24 (π.χ. 100 ώρες -> "100:00:00").
    """
    total_seconds = max(int(duration_millis), 0) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def mime_type_for(asset_type: AssetType) -> str:
    return MIME_TYPES.get(asset_type, DEFAULT_MIME_TYPE)


def cdata(value: str) -> str:
    """
    Τυλίγει σε CDATA. Ένα "]]>" μέσα στην τιμή σπάει σε δύο sections,
    ώστε να μην κλείνει πρόωρα το CDATA.
    """
    return "<![CDATA[" + value.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def build_vast_xml(creative: Creative, asset_id: str) -> str:
    """
    Φτιάχνει VAST 4.0 document για ένα creative.
    Όλες οι τιμές που μπαίνουν στο template γίνονται escape.
    """
    impression_url = f"{IMPRESSION_BASE_URL}/{creative.campaign_run or ''}"
    return VAST_TEMPLATE.format(
        ad_id=quoteattr(asset_id),
        title=escape(creative.filename or "Creative"),
        impression=cdata(impression_url),
        creative_id=quoteattr(f"{asset_id}-creative"),
        duration=format_duration(creative.duration),
        mime_type=quoteattr(mime_type_for(creative.type)),
        width=MEDIA_WIDTH,
        height=MEDIA_HEIGHT,
        media_url=cdata(creative.file_url or ""),
    )


def render_vast(creative: Creative, asset_id: str) -> str:
    """Αν υπάρχει έτοιμο vast_xml το γυρνάμε αυτούσιο, αλλιώς το φτιάχνουμε."""
    if creative.vast_xml:
        return creative.vast_xml
    return build_vast_xml(creative, asset_id)


class VastService:
    def __init__(self, repository: CreativeRepository) -> None:
        self._repository = repository

    def get_media_xml(self, asset_id: str | None) -> str:
        if not asset_id or not asset_id.strip():
            raise ClientInputError(USAGE_MESSAGE)

        not_found = NotFoundError(f'Error: Creative with asset ID "{asset_id}" not found')
        try:
            creative = self._repository.find_creative_by_asset_id(asset_id)
        except UpstreamReadError as exc:
            # π.χ. asset id που δεν είναι uuid: για τον client απλά δεν υπάρχει
            logger.warning("Lookup of asset %r failed: %s", asset_id, exc.__cause__ or exc.message)
            raise not_found from exc
        if creative is None:
            raise not_found

        return render_vast(creative, asset_id)

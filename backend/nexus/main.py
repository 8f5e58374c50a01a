# backend/nexus/main.py

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Body, Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from nexus.config import CORS_ORIGINS, PORT, invalid_settings, log_level, missing_credentials
from nexus.errors import ClientInputError, NexusError, NotFoundError

# Models
from nexus.models.content_plan_models import CampaignUpdateResponse, ContentPlan

# Services
from nexus.services.campaign_update_service import CampaignUpdateService
from nexus.services.content_plan_service import ContentPlanService
from nexus.services.creative_repository import CreativeRepository, get_creative_repository
from nexus.services.metadata_service import MetadataService
from nexus.services.override_store import OverrideStore, get_override_store
from nexus.services.vast_service import VastService

logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

ENDPOINTS = (
    "GET  /api/content_plan",
    "GET  /api/operational_metadata",
    "POST /api/config",
    "GET  /api/media?assetId=<asset_id>",
    "PUT  /api/campaign/<campaign_run>",
    "GET  /api/campaign-updates",
    "GET  /health",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    missing = missing_credentials()
    if missing:
        # χωρίς credentials δεν σερβίρουμε τίποτα
        logger.critical("Missing database credentials: %s", ", ".join(missing))
        raise RuntimeError(f"Missing database credentials: {', '.join(missing)}")

    invalid = invalid_settings()
    if invalid:
        logger.critical("Invalid settings: %s", "; ".join(invalid))
        raise RuntimeError(f"Invalid settings: {'; '.join(invalid)}")

    logger.info("NEXUS Backend running on port %s", PORT)
    for endpoint in ENDPOINTS:
        logger.info("   %s", endpoint)
    yield


app = FastAPI(title="NEXUS Backend", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(NexusError)
async def nexus_error_handler(request: Request, exc: NexusError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


# -----------------------------
#  DEPENDENCIES
# -----------------------------
def get_content_plan_service(
    repository: CreativeRepository = Depends(get_creative_repository),
    store: OverrideStore = Depends(get_override_store),
) -> ContentPlanService:
    return ContentPlanService(repository, store)


def get_metadata_service(
    repository: CreativeRepository = Depends(get_creative_repository),
) -> MetadataService:
    return MetadataService(repository)


def get_vast_service(
    repository: CreativeRepository = Depends(get_creative_repository),
) -> VastService:
    return VastService(repository)


def get_campaign_update_service(
    repository: CreativeRepository = Depends(get_creative_repository),
    store: OverrideStore = Depends(get_override_store),
) -> CampaignUpdateService:
    return CampaignUpdateService(repository, store)


@app.api_route("/health", methods=["GET", "HEAD"])
def health():
    return {"status": "OK", "message": "NEXUS Backend is running"}


# -----------------------------
#  CONTENT PLAN
# -----------------------------
@app.get("/api/content_plan", response_model=ContentPlan)
def get_content_plan(service: ContentPlanService = Depends(get_content_plan_service)):
    return service.build_content_plan()


# -----------------------------
#  METADATA / SCREEN CONFIG
# -----------------------------
@app.get("/api/operational_metadata")
def get_operational_metadata(service: MetadataService = Depends(get_metadata_service)):
    return service.get_operational_metadata()


@app.post("/api/config")
def get_screen_config(service: MetadataService = Depends(get_metadata_service)):
    return service.get_screen_config()


# -----------------------------
#  MEDIA (VAST XML)
# -----------------------------
@app.get("/api/media")
def get_media(
    asset_id: str | None = Query(None, alias="assetId"),
    service: VastService = Depends(get_vast_service),
):
    try:
        vast_xml = service.get_media_xml(asset_id)
    except ClientInputError as exc:
        return PlainTextResponse(exc.message, status_code=400)
    except NotFoundError as exc:
        return PlainTextResponse(exc.message, status_code=404)
    except Exception:
        logger.exception("Error generating VAST XML for %s", asset_id)
        return PlainTextResponse("Error: Failed to generate media XML", status_code=500)

    return Response(content=vast_xml, media_type="application/xml")


# -----------------------------
#  CAMPAIGN OVERRIDES
# -----------------------------
@app.put("/api/campaign", include_in_schema=False)
@app.put("/api/campaign/", include_in_schema=False)
def update_campaign_without_run():
    raise ClientInputError("Campaign run is required")


@app.put("/api/campaign/{campaign_run}", response_model=CampaignUpdateResponse)
def update_campaign(
    campaign_run: str,
    payload: Any = Body(None),
    service: CampaignUpdateService = Depends(get_campaign_update_service),
):
    return service.update(campaign_run, payload)


@app.get("/api/campaign-updates")
def list_campaign_updates(store: OverrideStore = Depends(get_override_store)):
    """Debug: όλα τα overrides που κρατάμε στη μνήμη."""
    return store.all()


def run() -> None:
    import uvicorn

    uvicorn.run("nexus.main:app", host="0.0.0.0", port=PORT)

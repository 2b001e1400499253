from fastapi import APIRouter

from quickal.config import settings
from quickal.routes.dto import HealthResponse

router = APIRouter()


@router.get("/", response_model=HealthResponse)
def health_check():
    return {"status": "ok"}


@router.get("/config", response_model=HealthResponse)
def config_health_check():
    """
    Report which settings are configured, without exposing their values.
    """
    components = {
        "assistant_llm_api_key": "configured" if settings.ASSISTANT_LLM_API_KEY else "missing",
        "assistant_llm_model": f"{settings.ASSISTANT_LLM_PROVIDER}:{settings.ASSISTANT_LLM_MODEL}",
        "calendar_timezone": settings.CALENDAR_TIMEZONE,
    }
    status = "ok" if settings.ASSISTANT_LLM_API_KEY else "degraded"
    return {"status": status, "service": "quickal", "components": components}

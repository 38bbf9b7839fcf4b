from __future__ import annotations

from fastapi import APIRouter, Depends

from llm_driver.anthropic.driver import DRIVER_NAME
from llm_driver.core.settings import GatewaySettings
from llm_driver.dependencies import get_settings

router = APIRouter(prefix="/internal", tags=["internal"])


@router.get("/healthz")
async def healthz(settings: GatewaySettings = Depends(get_settings)) -> dict[str, str]:
    return {
        "status": "ok",
        "provider": DRIVER_NAME,
        "model": settings.model_name,
    }

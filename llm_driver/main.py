from __future__ import annotations

import logging

from fastapi import FastAPI

from llm_driver.core.settings import GatewaySettings
from llm_driver.dependencies import register_exception_handlers
from llm_driver.internal import admin
from llm_driver.routers import llm


def create_app(settings: GatewaySettings | None = None) -> FastAPI:
    settings = settings or GatewaySettings.from_env()
    logging.getLogger("llm_driver").setLevel(settings.log_level)

    app = FastAPI(
        title="llm-driver",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )
    app.state.settings = settings

    register_exception_handlers(app)

    app.include_router(llm.router)
    app.include_router(admin.router)

    return app


app = create_app()

"""
FastAPI application.

Run with:
    uvicorn titleorder.api.app:app --port 3000
or:
    python scripts/generate_order_pdf.py serve
"""

import os
import threading
from typing import Any, Dict, Optional

import httpx
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from titleorder import __version__
from titleorder.api.routes import router
from titleorder.contexts.intake.clickup_client import ClickUpClient, ClickUpCredentials
from titleorder.contexts.intake.record_builder import load_field_map
from titleorder.contexts.rendering.artifacts import sweep_stale_staging_dirs
from titleorder.contexts.rendering.pipeline import PipelineConfig

load_dotenv()
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")
TITLEORDER_LIST_ID = os.getenv("TITLEORDER_LIST_ID", "")
# Simultaneous pdflatex runs per process
MAX_PARALLEL_RENDERS = int(os.getenv("MAX_PARALLEL_RENDERS", "2"))


def create_app(
    clickup: Optional[ClickUpClient] = None,
    pipeline_config: Optional[PipelineConfig] = None,
    field_map: Optional[Dict[str, Any]] = None,
    frontend_url: str = FRONTEND_URL,
    list_id: str = TITLEORDER_LIST_ID,
    max_parallel_renders: int = MAX_PARALLEL_RENDERS,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> FastAPI:
    """
    Build the API app.

    All per-process state (ClickUp credentials, render slots, config) lives on
    ``app.state`` so each app instance is independent.

    Args:
        clickup: ClickUp client (default: from environment)
        pipeline_config: PDF pipeline settings (default: from environment)
        field_map: Custom field map (default: load_field_map())
        frontend_url: CORS origin and OAuth success redirect target
        list_id: ClickUp list holding title orders
        max_parallel_renders: Compilations allowed at once
        transport: httpx transport for the default ClickUp client
    """
    app = FastAPI(title="Title Order", version=__version__)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_url],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.clickup = clickup or ClickUpClient(transport=transport)
    app.state.credentials = ClickUpCredentials()
    app.state.pipeline_config = pipeline_config or PipelineConfig()
    app.state.field_map = field_map or load_field_map()
    app.state.frontend_url = frontend_url
    app.state.list_id = list_id
    app.state.render_slots = threading.BoundedSemaphore(max_parallel_renders)

    @app.on_event("startup")
    def sweep_staging_root():
        sweep_stale_staging_dirs(app.state.pipeline_config.staging_root)

    app.include_router(router)
    return app


app = create_app()

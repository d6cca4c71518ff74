"""
HTTP routes: ClickUp OAuth proxy, task access and PDF generation.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import FileResponse, PlainTextResponse, RedirectResponse
from starlette.background import BackgroundTask

from titleorder.api.logger import _log_error, _log_info
from titleorder.api.schemas import OrderRecordBody
from titleorder.contexts.intake.clickup_client import ClickUpClient, ClickUpCredentials
from titleorder.contexts.intake.exceptions import ClickUpAPIError
from titleorder.contexts.intake.record_builder import build_order_record
from titleorder.contexts.rendering.artifacts import discard_artifact, sweep_stale_staging_dirs
from titleorder.contexts.rendering.exceptions import DocumentGenerationError
from titleorder.contexts.rendering.pipeline import GENERATION_FAILED_MESSAGE, generate_pdf

PDF_FILENAME = "TitleOrder.pdf"
PDF_MEDIA_TYPE = "application/pdf"

router = APIRouter()


# DI


def get_clickup(request: Request) -> ClickUpClient:
    return request.app.state.clickup


def get_credentials(request: Request) -> ClickUpCredentials:
    return request.app.state.credentials


def require_credentials(
    credentials: ClickUpCredentials = Depends(get_credentials),
) -> ClickUpCredentials:
    if not credentials.is_authenticated:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    return credentials


@router.get("/", response_class=PlainTextResponse)
def health():
    return "Backend server is running!"


@router.get("/api/auth")
def start_oauth(clickup: ClickUpClient = Depends(get_clickup)):
    """Send the browser to ClickUp's consent page."""
    return RedirectResponse(clickup.authorize_url())


@router.get("/api/callback")
async def oauth_callback(
    request: Request,
    code: Optional[str] = None,
    clickup: ClickUpClient = Depends(get_clickup),
):
    """Exchange the authorization code and send the browser back to the frontend."""
    if not code:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing code")

    try:
        credentials = await clickup.exchange_code(code)
    except ClickUpAPIError as e:
        _log_error(f"Token exchange error: {e}")
        raise HTTPException(status_code=500, detail="OAuth Error") from e

    request.app.state.credentials.access_token = credentials.access_token
    return RedirectResponse(f"{request.app.state.frontend_url}?auth=success")


@router.get("/api/titleorder/tasks")
async def list_title_order_tasks(
    request: Request,
    credentials: ClickUpCredentials = Depends(require_credentials),
    clickup: ClickUpClient = Depends(get_clickup),
):
    """Tasks of the title order list."""
    try:
        return await clickup.get_list_tasks(request.app.state.list_id, credentials)
    except ClickUpAPIError as e:
        raise HTTPException(status_code=500, detail="API Error") from e


@router.get("/api/titleorder/tasks/{task_id}/record")
async def get_title_order_record(
    task_id: str,
    request: Request,
    credentials: ClickUpCredentials = Depends(require_credentials),
    clickup: ClickUpClient = Depends(get_clickup),
):
    """Order record assembled from a task's custom fields and parcel subtasks."""
    try:
        task, subtasks = await clickup.get_order_task(task_id, credentials)
    except ClickUpAPIError as e:
        raise HTTPException(status_code=500, detail="API Error") from e

    record = build_order_record(task, subtasks, field_map=request.app.state.field_map)
    return record.to_dict()


@router.get("/api/data")
async def get_user_data(
    credentials: ClickUpCredentials = Depends(require_credentials),
    clickup: ClickUpClient = Depends(get_clickup),
):
    """The authenticated ClickUp user."""
    try:
        return await clickup.get_user(credentials)
    except ClickUpAPIError as e:
        raise HTTPException(status_code=500, detail="API Error") from e


@router.post("/api/pdf")
def generate_order_pdf(body: OrderRecordBody, request: Request):
    """
    Render an order record to PDF and stream it as an attachment.

    Sync route: FastAPI runs it in its threadpool, so the compiler wait does
    not block the event loop. The PDF is deleted once the response is sent.
    """
    record = body.to_record()
    config = request.app.state.pipeline_config
    # Staging dirs of downloads that never finished
    sweep_stale_staging_dirs(config.staging_root)

    with request.app.state.render_slots:
        try:
            pdf_path = generate_pdf(record, config)
        except DocumentGenerationError as e:
            raise HTTPException(status_code=500, detail=GENERATION_FAILED_MESSAGE) from e

    _log_info(f"Sending {pdf_path.name}")
    return FileResponse(
        pdf_path,
        media_type=PDF_MEDIA_TYPE,
        filename=PDF_FILENAME,
        background=BackgroundTask(discard_artifact, pdf_path),
    )

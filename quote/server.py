"""
HTTP boundary of the quote service.
POST /render/cotizacion returns the assembled quote PDF.
"""

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from .pipeline import QuotePipeline
from .settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class QuoteRequest(BaseModel):
    data: Optional[Dict[str, Any]] = None


def create_app(settings: Optional[Settings] = None,
               pipeline: Optional[QuotePipeline] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Service settings (module settings if omitted)
        pipeline: Quote pipeline (wired from settings if omitted)
    """
    settings = settings or default_settings
    pipeline = pipeline or QuotePipeline.from_settings(settings)

    app = FastAPI(title="Solar Quote Service")
    app.state.pipeline = pipeline

    # The renderer loads the pages from this same process
    app.mount(
        "/templates",
        StaticFiles(directory=str(settings.TEMPLATES_DIR), html=True, check_dir=False),
        name="templates",
    )

    @app.get("/health", response_class=PlainTextResponse)
    def health() -> str:
        return "ok"

    @app.post("/render/cotizacion")
    async def render_cotizacion(request: Request, body: QuoteRequest):
        result = await request.app.state.pipeline.run(body.data or {})

        if not result.ok:
            failure = result.failure
            logger.error("Render error (%s at %s): %s",
                         failure.kind.value, failure.stage, failure.message)
            if request.query_params.get("debug") == "1":
                return JSONResponse(
                    status_code=500,
                    content={"error": "Render failed", "detail": failure.message},
                )
            return PlainTextResponse("Render failed", status_code=500)

        return Response(
            content=result.value,
            media_type="application/pdf",
            headers={"Content-Disposition": 'attachment; filename="cotizacion.pdf"'},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Render error: %s", exc)
        if request.query_params.get("debug") == "1":
            return JSONResponse(status_code=500, content={"error": "Render failed", "detail": str(exc)})
        return PlainTextResponse("Render failed", status_code=500)

    return app

import logging
import sys
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from bundle_analyzer import __version__
from bundle_analyzer.config import ConfigurationError, Settings, configure_logging, load_settings
from bundle_analyzer.context_builder import render_prompt
from bundle_analyzer.llm_client import ModelGateway, build_gateway, create_openai_client
from bundle_analyzer.report_parser import ResponseFormatError, SchemaViolationError, parse_report
from bundle_analyzer.schemas import AnalysisRequest, AnalysisResponse

logger = logging.getLogger(__name__)

CODE_FILES_REQUIRED_MESSAGE = "Request body must include a non-empty 'codeFiles' array."
PROCESSING_ERROR_MESSAGE = "An internal error occurred while processing the analysis."
INVALID_JSON_MESSAGE = "The model did not return the requested JSON format."
SCHEMA_VIOLATION_MESSAGE = "The model response did not match the analysis report schema."


def _is_code_files_error(error: dict) -> bool:
    loc = tuple(error.get("loc", ()))
    # Missing/invalid body, or codeFiles itself missing, not a list, or empty.
    return loc in {("body",), ("body", "codeFiles")} or error.get("type") == "json_invalid"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict) and "status" in detail and "message" in detail:
        content = detail
    else:
        content = {"status": "error", "message": str(detail)}
    return JSONResponse(status_code=exc.status_code, content=content)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if not errors or any(_is_code_files_error(e) for e in errors):
        msg = CODE_FILES_REQUIRED_MESSAGE
    else:
        msg = "; ".join(
            f"{'.'.join(str(l) for l in e['loc'] if l != 'body')}: {e['msg']}" for e in errors
        )
    logger.info(f"Rejected analysis request: {msg}")
    return JSONResponse(status_code=400, content={"error": msg})


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"status": "error", "message": PROCESSING_ERROR_MESSAGE, "detail": str(exc)},
    )


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_gateway(request: Request) -> ModelGateway:
    return request.app.state.gateway


async def analyze(
    body: AnalysisRequest,
    settings: Settings = Depends(get_settings),
    gateway: ModelGateway = Depends(get_gateway),
) -> AnalysisResponse:
    start_time = time.monotonic()
    logger.info(f"Analysis request: title={body.title!r}, files={len(body.code_files)}")

    # 1. Build prompt and call the model
    try:
        prompt = render_prompt(body.title, body.code_files, language=settings.report_language)
        raw = await gateway.send(prompt)
    except Exception as exc:
        logger.error(f"Analysis failed: {exc}")
        raise HTTPException(
            status_code=500,
            detail={"status": "error", "message": PROCESSING_ERROR_MESSAGE, "detail": str(exc)},
        )

    # 2. Parse the completion
    try:
        analysis = parse_report(raw, strict=settings.strict_report_schema)
    except ResponseFormatError as exc:
        raise HTTPException(
            status_code=500,
            detail={"status": "error", "message": INVALID_JSON_MESSAGE, "detail": exc.excerpt},
        )
    except SchemaViolationError as exc:
        raise HTTPException(
            status_code=500,
            detail={"status": "error", "message": SCHEMA_VIOLATION_MESSAGE, "detail": str(exc)},
        )

    elapsed = time.monotonic() - start_time
    logger.info(f"Analysis complete for {body.title!r} in {elapsed:.1f}s")
    return AnalysisResponse(analysis=analysis)


async def health_check() -> dict:
    return {"status": "ok"}


def create_app(settings: Settings, gateway: Optional[ModelGateway] = None) -> FastAPI:
    """Build the FastAPI app. A gateway may be injected; otherwise one is built from settings."""
    client = None
    if gateway is None:
        client = create_openai_client(settings)
        gateway = build_gateway(settings, client)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Code bundle analyzer starting up - model={settings.model}")
        yield
        if client is not None:
            await client.close()
        logger.info("Code bundle analyzer shutting down")

    app = FastAPI(
        title="Code Bundle Analyzer",
        description="Evaluates submitted program code bundles using LLM analysis",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.gateway = gateway

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    app.add_api_route("/health", health_check, methods=["GET"])
    app.add_api_route("/analyze", analyze, methods=["POST"], response_model=AnalysisResponse)
    return app


def main() -> None:
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        # No settings to read the level from; fall back to LOG_LEVEL.
        configure_logging()
        logger.critical(f"Configuration error: {exc}")
        sys.exit(1)

    configure_logging(settings.log_level)
    app = create_app(settings)
    logger.info(f"Serving on http://{settings.host}:{settings.port} - POST /analyze")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()

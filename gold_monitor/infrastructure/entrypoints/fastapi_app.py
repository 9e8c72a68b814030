"""
FastAPI application: HTTP surface and Composition Root.

create_app() wires the infrastructure adapters into the use cases once per
application instance. Every request is otherwise independent; no state is
shared between requests.

Run locally (plain HTTP, reload):
    uvicorn gold_monitor.infrastructure.entrypoints.fastapi_app:create_app --factory --reload --port 8000
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse

from gold_monitor.application.use_cases.get_candle_history import (
    DEFAULT_INTERVAL,
    DEFAULT_RANGE,
    GetCandleHistoryUseCase,
)
from gold_monitor.application.use_cases.get_price_snapshot import GetPriceSnapshotUseCase
from gold_monitor.application.use_cases.relay_chat import RelayChatUseCase
from gold_monitor.domain.errors import (
    BadRequest,
    ConfigurationError,
    UnsupportedInterval,
    UpstreamError,
    UpstreamHttpError,
)
from gold_monitor.domain.ports.llm_port import ILanguageModel
from gold_monitor.domain.ports.market_data_port import IMarketDataProvider
from gold_monitor.infrastructure.config.settings import Settings, load_env
from gold_monitor.infrastructure.entrypoints.schemas import (
    ChatRequest,
    ChatResponse,
    ErrorResponse,
    HistoryResponse,
    PriceResponse,
)
from gold_monitor.infrastructure.llm.openai_chat_adapter import OpenAIChatAdapter
from gold_monitor.infrastructure.market_data.okx_adapter import OKXMarketDataProvider

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 1024 * 1024


def _error(status_code: int, message: str, details: Optional[str] = None) -> JSONResponse:
    content = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def _build_llm(settings: Settings) -> Optional[ILanguageModel]:
    if not settings.openai_api_key:
        return None
    return OpenAIChatAdapter(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.openai_model,
        temperature=settings.openai_temperature,
        timeout=settings.openai_timeout,
    )


def create_app(
    settings: Optional[Settings] = None,
    *,
    market_provider: Optional[IMarketDataProvider] = None,
    llm: Optional[ILanguageModel] = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        settings:        Defaults to Settings.from_env() after loading .env files.
        market_provider: Defaults to OKXMarketDataProvider for the configured instrument.
        llm:             Defaults to OpenAIChatAdapter when OPENAI_API_KEY is set,
                         otherwise chat requests fail with 500.
    """
    if settings is None:
        load_env()
        settings = Settings.from_env()

    market_provider = market_provider or OKXMarketDataProvider(
        instrument=settings.okx_instrument,
        base_url=settings.okx_base_url,
        timeout=settings.upstream_timeout,
    )
    llm = llm or _build_llm(settings)

    price_use_case = GetPriceSnapshotUseCase(market_provider)
    history_use_case = GetCandleHistoryUseCase(market_provider)
    chat_use_case = RelayChatUseCase(llm)
    public_dir = Path(settings.public_dir).resolve()

    app = FastAPI(title="Gold Monitor API")

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        length = request.headers.get("content-length")
        if length and length.isdigit() and int(length) > MAX_BODY_BYTES:
            return _error(413, "Request body too large")
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return _error(400, "Invalid request body")

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    @app.get(
        "/api/price",
        response_model=PriceResponse,
        responses={502: {"model": ErrorResponse}},
    )
    async def get_price():
        try:
            snapshot = await price_use_case.execute()
        except UpstreamError as exc:
            logger.error("Price fetch error: %s", exc)
            return _error(502, "Failed to retrieve gold price")
        return PriceResponse.from_entity(snapshot)

    @app.get(
        "/api/history",
        response_model=HistoryResponse,
        responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
    )
    async def get_history(
        range_key: str = Query(DEFAULT_RANGE, alias="range"),
        interval: str = DEFAULT_INTERVAL,
    ):
        try:
            history = await history_use_case.execute(range_key=range_key, interval=interval)
        except UnsupportedInterval:
            return _error(400, "Unsupported interval")
        except UpstreamError as exc:
            logger.error("History fetch error: %s", exc)
            return _error(502, "Failed to retrieve historical data")
        return HistoryResponse.from_entity(history)

    @app.post(
        "/api/chat",
        response_model=ChatResponse,
        responses={
            400: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
    )
    async def chat(body: ChatRequest):
        try:
            result = await chat_use_case.execute(
                body.messages,
                price_snapshot=body.priceSnapshot,
                chart_context=body.chartContext,
            )
        except ConfigurationError as exc:
            return _error(500, str(exc))
        except BadRequest as exc:
            return _error(400, str(exc))
        except UpstreamHttpError as exc:
            logger.error("Chat upstream failed: %s %s", exc.status, exc.body)
            return _error(exc.status, "LLM upstream error", details=exc.body)
        except UpstreamError as exc:
            logger.error("Chat proxy error: %s", exc)
            return _error(502, "Failed to contact language model provider")
        return ChatResponse(reply=result.reply, usage=result.usage)

    @app.get("/{full_path:path}", include_in_schema=False)
    async def static_page(full_path: str):
        """Serve files from public/, falling back to index.html for client-side routes."""
        if full_path == "api" or full_path.startswith("api/"):
            return _error(404, "Not found")
        if full_path:
            try:
                candidate = (public_dir / full_path).resolve()
                found = candidate.is_relative_to(public_dir) and candidate.is_file()
            except (ValueError, OSError):
                # embedded NUL or a name the filesystem rejects
                found = False
            if found:
                return FileResponse(candidate)
        index = public_dir / "index.html"
        if not index.is_file():
            return _error(404, "Not found")
        return FileResponse(index)

    return app

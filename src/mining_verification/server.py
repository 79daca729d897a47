"""Mining Verification API server.

FastAPI app answering "has this wallet mined?" from MiningRig view functions.
Run: mining-verification-api
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .config import Settings, load_settings
from .core import responses
from .core.addresses import is_valid_address
from .core.errors import ClientInputError, ConfigurationError
from .core.evaluation import find_first_meeting_threshold, find_highest_score, verify_batch
from .core.models import ThresholdMetric
from .core.registry import RigRegistry, build_registry
from .core.store import InMemoryQueriedAddressStore, QueriedAddressStore
from .core.thresholds import parse_min_score, parse_min_txs

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

ENDPOINTS = [
    "GET  /health",
    "GET  /api/verify/{walletAddress}",
    "GET  /api/verify/{walletAddress}/min-txs/{minTxs}",
    "GET  /api/verify/{walletAddress}/min-score/{minScore}",
    "POST /api/verify/batch",
]

BATCH_BODY_ERROR = "Invalid request: walletAddresses must be a non-empty array"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Log the effective configuration once the server is up."""
    settings: Settings = app.state.settings
    registry: RigRegistry = app.state.registry
    configure_logging(settings.log_level)

    logger.info("Mining Verification API %s starting", __version__)
    logger.info("Simple mode: %s", "ENABLED" if settings.simple_mode else "DISABLED")
    logger.info("RPC URL: %s", settings.rpc_url or "not configured")
    if len(registry):
        for entry in registry:
            logger.info("Rig %s: %s", entry.display_name, entry.address)
    else:
        logger.info("Contract addresses: not configured")
    if registry.invalid_addresses:
        logger.warning("Invalid rig addresses ignored: %s", ", ".join(registry.invalid_addresses))
    logger.info("Available endpoints:\n  %s", "\n  ".join(ENDPOINTS))
    yield
    logger.info("Mining Verification API stopped")


def _json(body: dict, status_code: int = 200) -> JSONResponse:
    return JSONResponse(body, status_code=status_code)


def _require_address(wallet_address: str) -> None:
    if not is_valid_address(wallet_address):
        raise ClientInputError("Invalid wallet address")


# ─── Error handlers ──────────────────────────────────────────────────────────


async def _client_input_error(request: Request, exc: ClientInputError) -> JSONResponse:
    return _json(responses.error_body(str(exc)), 400)


async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("Request to %s failed: %s", request.url.path, exc)
    return _json(responses.server_error(str(exc)), 500)


async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code in (404, 405):
        return _json(responses.error_body("Endpoint not found"), 404)
    return _json(responses.error_body(str(exc.detail)), exc.status_code)


async def _unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    return _json(responses.server_error(), 500)


# ─── Routes ──────────────────────────────────────────────────────────────────


async def health(request: Request) -> JSONResponse:
    return _json(responses.health(request.app.state.registry.describe()))


async def verify(wallet_address: str, request: Request) -> JSONResponse:
    """Best-scoring rig for a wallet, or pass/fail text in simple mode."""
    _require_address(wallet_address)

    state = request.app.state
    simple_mode = state.settings.simple_mode
    store: QueriedAddressStore = state.queried_addresses

    if simple_mode and store.contains(wallet_address):
        return _json(responses.simple_repeat(), 400)

    rigs = state.registry.require_rigs()
    outcome = await find_highest_score(rigs, wallet_address)

    if outcome.best is not None:
        if simple_mode:
            store.add(wallet_address)
            return _json(responses.simple_pass(outcome.best.computed_score))
        return _json(responses.verify_mined(wallet_address, outcome.best))

    if outcome.last_error:
        return _json(responses.server_error(outcome.last_error), 500)

    if simple_mode:
        return _json(responses.simple_fail(), 400)
    return _json(responses.verify_not_mined())


async def verify_min_txs(wallet_address: str, min_txs: str, request: Request) -> JSONResponse:
    _require_address(wallet_address)
    rigs = request.app.state.registry.require_rigs()
    required = parse_min_txs(min_txs)

    outcome = await find_first_meeting_threshold(rigs, wallet_address, ThresholdMetric.TOTAL_MINING_TXS, required)

    if outcome.match is not None:
        return _json(responses.min_txs_result(wallet_address, outcome.match, required, meets=True))
    if outcome.last_error:
        return _json(responses.server_error(outcome.last_error), 500)
    if outcome.first_mined is None:
        return _json(responses.min_txs_not_mined(required))
    return _json(responses.min_txs_result(wallet_address, outcome.first_mined, required, meets=False))


async def verify_min_score(wallet_address: str, min_score: str, request: Request) -> JSONResponse:
    _require_address(wallet_address)
    rigs = request.app.state.registry.require_rigs()
    required = parse_min_score(min_score)

    outcome = await find_first_meeting_threshold(rigs, wallet_address, ThresholdMetric.COMPUTED_SCORE, required)

    if outcome.match is not None:
        return _json(responses.min_score_result(wallet_address, outcome.match, required, meets=True))
    if outcome.last_error:
        return _json(responses.server_error(outcome.last_error), 500)
    if outcome.first_mined is None:
        return _json(responses.min_score_not_mined(required))
    return _json(responses.min_score_result(wallet_address, outcome.first_mined, required, meets=False))


async def verify_batch_endpoint(request: Request) -> JSONResponse:
    """Body: ``{"walletAddresses": [...]}``. Always 200 once the body is valid."""
    try:
        payload = await request.json()
    except ValueError:
        payload = None

    wallet_addresses = payload.get("walletAddresses") if isinstance(payload, dict) else None
    if not isinstance(wallet_addresses, list) or not wallet_addresses:
        raise ClientInputError(BATCH_BODY_ERROR)

    rigs = request.app.state.registry.require_rigs()
    results = await verify_batch(rigs, wallet_addresses)
    return _json(responses.batch(results))


# ─── App factory ─────────────────────────────────────────────────────────────


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[RigRegistry] = None,
    store: Optional[QueriedAddressStore] = None,
) -> FastAPI:
    """Build the API. Tests pass their own registry and store."""
    if settings is None:
        settings = load_settings()
    if registry is None:
        registry = build_registry(settings)
    if store is None:
        store = InMemoryQueriedAddressStore()

    app = FastAPI(
        title="Mining Verification API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.queried_addresses = store

    app.add_exception_handler(ClientInputError, _client_input_error)
    app.add_exception_handler(ConfigurationError, _configuration_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(Exception, _unhandled_error)

    app.add_api_route("/health", health, methods=["GET"])
    app.add_api_route("/api/verify/batch", verify_batch_endpoint, methods=["POST"])
    app.add_api_route("/api/verify/{wallet_address}", verify, methods=["GET"])
    app.add_api_route("/api/verify/{wallet_address}/min-txs/{min_txs}", verify_min_txs, methods=["GET"])
    app.add_api_route("/api/verify/{wallet_address}/min-score/{min_score}", verify_min_score, methods=["GET"])
    return app


app = create_app()


def main():
    """Entry point for the CLI command."""
    settings = load_settings()
    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()

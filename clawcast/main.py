"""Main FastAPI application."""
import asyncio
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from clawcast.api import health
from clawcast.api.webhooks import vapi
from clawcast.core import config
from clawcast.core.dependencies import close_completion_backend, get_session_store
from clawcast.core.logging import setup_logging
from clawcast.services.call_session.store import SessionStore

logger = logging.getLogger(__name__)


async def sweep_idle_sessions(
    store: SessionStore, max_idle_seconds: float, interval_seconds: float
) -> None:
    """Periodically drop sessions whose call-ended event never arrived."""
    while True:
        await asyncio.sleep(interval_seconds)
        evicted = store.evict_idle(max_idle_seconds)
        if evicted:
            logger.info(
                f"[SESSION SWEEP] Evicted {len(evicted)} idle session(s): {', '.join(evicted)}"
            )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    settings = config.settings
    setup_logging(settings.log_level)
    logger.info(f"ClawCast running on port {settings.port}")
    logger.info(f"   LLM: {settings.llm_provider} / {settings.llm_model}")
    logger.info(f"   Webhook: http://localhost:{settings.port}/webhook")
    logger.info(f"   Health: http://localhost:{settings.port}/health")
    if not settings.llm_api_key:
        logger.error("No LLM_API_KEY set! Set ANTHROPIC_API_KEY or LLM_API_KEY env var.")

    sweeper = None
    if settings.session_idle_ttl_seconds > 0:
        sweeper = asyncio.create_task(
            sweep_idle_sessions(
                get_session_store(settings),
                settings.session_idle_ttl_seconds,
                settings.session_sweep_interval_seconds,
            )
        )
    yield
    # Shutdown
    if sweeper is not None:
        sweeper.cancel()
        try:
            await sweeper
        except asyncio.CancelledError:
            pass
    await close_completion_backend()


app = FastAPI(
    title="ClawCast",
    description="Voice webhook relay between Vapi and an LLM backend",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router, tags=["health"])
app.include_router(vapi.router, tags=["webhooks"])


@app.exception_handler(StarletteHTTPException)
async def not_found_for_unrouted(request: Request, exc: StarletteHTTPException):
    """Answer unknown paths and unsupported methods alike with 404."""
    if exc.status_code in (404, 405):
        return PlainTextResponse("Not found", status_code=404)
    return await http_exception_handler(request, exc)


def run() -> None:
    """Run the server with uvicorn."""
    uvicorn.run(
        app,
        host=config.settings.host,
        port=config.settings.port,
        log_level=config.settings.log_level,
    )


if __name__ == "__main__":
    run()

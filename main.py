import asyncio
import inspect
import logging
import os
from contextlib import asynccontextmanager, suppress

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from openai import AsyncOpenAI
from starlette.exceptions import HTTPException as StarletteHTTPException

from routes.greeter_route import router as greeter_router
from routes.realtime_ws import router as realtime_router
from services.realtime.session_store import SessionStore
from services.realtime.upstream import RealtimeUpstreamConnector
from utils.database_cleaner import StoreCleaner
from utils.database_init import AsyncDatabaseInitializer
from utils.settings import GreeterSettings

load_dotenv()  # Load environment variables from .env file if present

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - the SQLite-backed session store (fresh on startup, at DATABASE_DIR/greeter.db)
      - the OpenAI async client and the realtime upstream connector
    and attach them to `app.state`.

    Missing configuration does not abort startup; the affected handlers
    answer with a 500 configuration error instead.
    """
    settings: GreeterSettings = getattr(app.state, "settings", None) or GreeterSettings.from_env()
    app.state.settings = settings

    cleanup_task = None
    if getattr(app.state, "session_store", None) is None and settings.database_dir is not None:
        db_initializer = AsyncDatabaseInitializer(settings.database_dir)
        await db_initializer.ensure_database()
        app.state.session_store = SessionStore(db_initializer)
    store = getattr(app.state, "session_store", None)
    if store is None:
        logger.warning("DATABASE_DIR is not set; session store disabled")
        app.state.session_store = None
    else:
        cleanup_task = asyncio.create_task(StoreCleaner(store, settings.purge_interval).run_periodic_cleanup())

    if getattr(app.state, "openai_client", None) is None:
        if settings.openai_api_key:
            try:
                app.state.openai_client = AsyncOpenAI(api_key=settings.openai_api_key)
            except Exception as exc:
                raise RuntimeError("Failed to initialize OpenAI Async client") from exc
        else:
            logger.warning("OPENAI_API_KEY is not set; provider endpoints disabled")
            app.state.openai_client = None

    if getattr(app.state, "upstream_connector", None) is None:
        app.state.upstream_connector = (
            RealtimeUpstreamConnector(settings) if settings.openai_api_key else None
        )

    try:
        yield
    finally:
        if cleanup_task is not None:
            cleanup_task.cancel()
            with suppress(asyncio.CancelledError):
                await cleanup_task

        # Gracefully close the OpenAI client if it exposes a close/aclose method.
        client = getattr(app.state, "openai_client", None)
        if client is not None:
            aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
            if aclose is not None:
                try:
                    if inspect.iscoroutinefunction(aclose):
                        await aclose()
                    else:
                        result = aclose()
                        if inspect.isawaitable(result):
                            await result
                except Exception as exc:
                    logger.warning("Error closing OpenAI client: %s", exc)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors as `{"error": ..., "details"?: ...}`."""
    if isinstance(exc.detail, dict):
        content = exc.detail
    else:
        content = {"error": str(exc.detail)}
    return JSONResponse(content, status_code=exc.status_code, headers=getattr(exc, "headers", None))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse({"error": "Invalid request body"}, status_code=400)


def create_app(
    settings: GreeterSettings | None = None,
    *,
    openai_client=None,
    session_store: SessionStore | None = None,
    upstream_connector=None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Any resource passed in is used as-is instead of being built from the
    environment during startup.
    """
    app = FastAPI(lifespan=lifespan)
    app.state.settings = settings
    app.state.openai_client = openai_client
    app.state.session_store = session_store
    app.state.upstream_connector = upstream_connector

    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports session store and OpenAI client presence.
        """
        state = request.app.state
        return {
            "ok": True,
            "store_initialized": getattr(state, "session_store", None) is not None,
            "openai_available": getattr(state, "openai_client", None) is not None,
        }

    # Register application routers
    app.include_router(greeter_router)
    app.include_router(realtime_router)

    return app


app = create_app()

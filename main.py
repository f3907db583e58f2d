import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.page_route import router as page_router
from routes.scan_route import router as scan_router
from services.image_decoder import ImageDecoder
from services.openai.image_classifier import SatelliteImageClassifier
from services.scan.session_store import SessionStore
from utils.settings import get_settings

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

LOGGER = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan manager to initialize:
      - settings and logging
      - the OpenAI async client and the satellite image classifier
      - the in-memory scan session store
    and attach them to `app.state`.
    """
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings

    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY environment variable is not set")

    try:
        openai_client = AsyncOpenAI(
            api_key=settings.openai_api_key,
            timeout=settings.openai_timeout_seconds,
            max_retries=settings.openai_max_retries,
        )
    except Exception as exc:
        raise RuntimeError("Failed to initialize OpenAI Async client") from exc

    app.state.openai_client = openai_client
    classifier = SatelliteImageClassifier(openai_client, model=settings.openai_model)
    app.state.session_store = SessionStore(
        classifier,
        decoder=ImageDecoder(),
        history_limit=settings.history_limit,
        max_sessions=settings.max_sessions,
        ttl_seconds=settings.session_ttl_seconds,
    )
    LOGGER.info(
        "Classifier ready: model=%s timeout=%ss max_retries=%s",
        settings.openai_model,
        settings.openai_timeout_seconds,
        settings.openai_max_retries,
    )

    try:
        yield
    finally:
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
                    LOGGER.warning("Error while closing OpenAI client: %s", exc)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application instance.
    """
    app = FastAPI(title="OrbitalEye", lifespan=lifespan)

    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that reports whether the classifier and session store are wired.
        """
        has_openai = getattr(request.app.state, "openai_client", None) is not None
        store = getattr(request.app.state, "session_store", None)
        return {
            "ok": True,
            "openai_available": has_openai,
            "sessions": len(store) if store is not None else 0,
        }

    # Register application routers
    app.include_router(scan_router)
    app.include_router(page_router)

    return app


app = create_app()

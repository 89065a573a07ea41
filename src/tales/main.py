import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict

from fastapi import FastAPI, Request

from tales.api.v1.api import api_router
from tales.core.config import settings
from tales.core.deps import build_clients
from tales.core.logger import configure_logging
from tales.services.session_registry import SessionRegistry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    configure_logging()

    clients = build_clients()
    app.state.clients = clients
    app.state.registry = SessionRegistry(clients.new_engine)

    if not settings.GEMINI_API_KEY.get_secret_value():
        logger.warning("GEMINI_API_KEY is not set; every story call will fail.")

    logger.info(f"{settings.PROJECT_NAME} starting... Swagger UI: /docs")
    yield

    logger.info(f"Shutting down with {len(app.state.registry)} open sessions.")


app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
)

app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
async def root() -> Dict[str, str]:
    return {"message": "Socratic Tales Service is running"}


@app.get("/health")
async def health_check(request: Request) -> Dict[str, str]:
    registry: SessionRegistry = request.app.state.registry
    return {"status": "ok", "sessions": str(len(registry))}


def run() -> None:
    import uvicorn

    uvicorn.run("tales.main:app", host="0.0.0.0", port=8020)

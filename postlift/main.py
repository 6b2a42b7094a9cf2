"""FastAPI application."""

from contextlib import asynccontextmanager

from fastapi import FastAPI

from postlift import __version__
from postlift.api import attribution_router, imports_router
from postlift.config import settings
from postlift.logging_config import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level, settings.log_format)
    yield


app = FastAPI(
    title="PostLift",
    version=__version__,
    description="Influencer campaign attribution without promo codes or pixels",
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(attribution_router)
app.include_router(imports_router)


@app.get("/health")
async def health() -> dict:
    return {"status": "ok", "version": __version__}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("postlift.main:app", host=settings.api_host, port=settings.api_port)

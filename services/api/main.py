"""API service for node execution preview."""

from fastapi import FastAPI
from services.api.routes.preview import router as preview_router
from services.api.middleware import CorrelationIdMiddleware
from shared.logging_config import setup_logging

setup_logging("api")

app = FastAPI(title="Workflow Node Preview API", version="1.0.0")
app.add_middleware(CorrelationIdMiddleware)

app.include_router(preview_router, tags=["Preview"])


@app.get("/")
async def root():
    return {"service": "api", "status": "running"}


@app.get("/health")
async def health():
    return {"status": "healthy"}

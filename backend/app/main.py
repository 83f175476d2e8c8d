import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .routers import files as files_router
from .routers import images as images_router
from .routers import tests as tests_router

logging.basicConfig(level=settings.log_level.upper())

app = FastAPI(
    title="Flow Viewer Backend",
    version="0.1.0",
    description="Read-only backend for browsing Maestro test output and reconstructed flow trees.",
)

# =========================
# CORS
# =========================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =========================
# Routers registration
# =========================
app.include_router(files_router.router, prefix=settings.api_prefix)
app.include_router(tests_router.router, prefix=settings.api_prefix)
app.include_router(images_router.router, prefix=settings.api_prefix)

# =========================
# Health endpoint
# =========================
@app.get("/health")
def health():
    return {"status": "ok", "service": settings.backend_name}

"""FastAPI application factory."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from plankernel.api.routes import router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Plan Kernel",
        description="Perimeter geometry, wall segmentation, snapping and parts lists for the floor-plan editor",
        version="0.1.0",
    )

    # CORS: allow the editor dev server
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api")

    return app


app = create_app()

"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from aical import __version__
from aical.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.aical_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="AI Cal",
        description="Food photo overlay engine — nutrition cards, labels, export and collages",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from aical.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()

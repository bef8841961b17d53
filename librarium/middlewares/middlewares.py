import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from librarium.config import config

logger = logging.getLogger(__name__)

API_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def setup_middlewares(app: FastAPI, origins: list[str] | None = None):
    origins = config.allowed_origins if origins is None else origins
    wildcard = "*" in origins
    logger.info(f"🌐 CORS origins: {origins}")

    # Браузер не приймає credentials разом з "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=not wildcard,
        allow_methods=API_METHODS,
        allow_headers=["*"],
    )

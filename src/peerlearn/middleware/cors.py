"""CORS for the web client.

Identity travels as a bearer token, never a cookie, so credentialed requests
are not enabled.
"""

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from peerlearn.config import Settings
from peerlearn.middleware.rate_limit import LIMIT_HEADER, REMAINING_HEADER
from peerlearn.middleware.request_id import REQUEST_ID_HEADER

API_METHODS = ("GET", "POST", "PATCH", "DELETE")
REQUEST_HEADERS = ("Authorization", "Content-Type", REQUEST_ID_HEADER)


def cors_options(settings: Settings) -> dict[str, Any]:
    """Keyword arguments for ``CORSMiddleware``."""
    return {
        "allow_origins": settings.cors_origins,
        "allow_origin_regex": settings.cors_origin_regex,
        "allow_credentials": False,
        "allow_methods": list(API_METHODS),
        "allow_headers": list(REQUEST_HEADERS),
        "expose_headers": [REQUEST_ID_HEADER, REMAINING_HEADER, LIMIT_HEADER],
        "max_age": settings.cors_max_age_seconds,
    }


def setup_cors(app: FastAPI, settings: Settings) -> None:
    app.add_middleware(CORSMiddleware, **cors_options(settings))

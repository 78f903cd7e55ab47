"""API app component: the FastAPI surface of the park knowledge service."""

from .main import create_app

__all__ = ["create_app"]

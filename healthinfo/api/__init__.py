"""API layer package for the node agent FastAPI application."""

from .application import create_api_application

__all__ = ["create_api_application"]

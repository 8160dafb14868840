"""HTTP interface for quiz generation and export."""

from .app import app, get_generation_service

__all__ = ["app", "get_generation_service"]

"""
HTTP API for the import pipeline.
"""

from .app import create_app

__all__ = ["create_app"]

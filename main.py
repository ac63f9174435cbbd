"""Main entry point for the application.

Usage: uvicorn main:app --reload
"""
from backend.main import create_app

app = create_app()

__all__ = ["app"]

"""
Entry point: ``uvicorn main:app --reload`` from the backend directory.
"""
from __future__ import annotations

from appia.main import create_app

app = create_app()

"""
HTTP API

Proxies ClickUp (OAuth, tasks, user) for the frontend and streams generated
order form PDFs.
"""

from titleorder.api.app import create_app

__all__ = ["create_app"]

"""
Name: Backend ASGI Entrypoint (commerce_api.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Preserve the import path used by uvicorn and tests

Notes/Constraints:
  - No configuration or IO should live here; keep it thin and predictable
  - Servers are configured to import commerce_api.main:app
"""

from commerce_api.api.main import app

__all__ = ["app"]

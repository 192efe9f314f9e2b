"""FastAPI application hosting the chat UI.

Endpoints:
    - GET /health: Service health status
    - GET /uploads/{token}/{name}: Files stored by the upload transport
"""

from xchat.api.app import create_app

__all__ = ["create_app"]

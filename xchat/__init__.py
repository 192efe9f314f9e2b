"""xchat - streaming chat session engine with attachment handling.

Keeps a conversation transcript, renders assistant replies chunk by chunk from a
remote streaming endpoint, and falls back to a locally simulated reply when that
endpoint is unavailable.

Components:
    - chat: message store, streaming ingestor, fallback simulator, session controller
    - attachments: upload transport, local object references, attachment resolver
    - models: message/attachment schemas
    - api: FastAPI app serving uploads and health checks
    - ui: NiceGUI chat page
"""

__version__ = "0.1.0"

"""Test package for xchat.

Structure:
    - unit/: Store, ingestor, fallback, controller, attachments and config tests
    - integration/: Full send cycles and upload serving through FastAPI apps

Endpoint doubles use httpx.MockTransport or a FastAPI app behind
httpx.ASGITransport; nothing reaches the network.
"""

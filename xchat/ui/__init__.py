"""NiceGUI interface - thin visualization layer for a chat session.

Responsibilities:
    - Message bubbles with a streaming indicator and attachment list
    - Upload widget wired to the local upload transport
    - Advisory error banner with retry, and a reset button

Contains no chat logic. Delegates every operation to the session controller.
"""

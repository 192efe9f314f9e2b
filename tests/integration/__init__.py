"""Integration tests running send cycles and uploads through real FastAPI apps."""

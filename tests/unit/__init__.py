"""Unit tests for isolated chat engine components."""

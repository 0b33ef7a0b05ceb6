"""Shared helpers: path utilities, logging setup and tracing."""

"""Plausible Analytics exposed as an MCP tool server."""

__version__ = "0.0.1"

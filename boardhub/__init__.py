"""Shared board rooms served over HTTP and WebSocket, with Redis pub/sub fan-out and Consul registration."""

__version__ = "1.0.0"
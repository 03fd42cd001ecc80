"""Parley HTTP and WebSocket server."""

"""Core models and schemas shared by the API and the real-time hub."""

from __future__ import annotations

from . import io

__all__ = ["io"]

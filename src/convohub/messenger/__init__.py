"""Conversation and message endpoints."""

from .router import router

__all__ = ["router"]

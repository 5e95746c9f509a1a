"""Adapters for external systems (document storage, Meta Graph, SMTP)."""

"""Audit log writing and querying."""

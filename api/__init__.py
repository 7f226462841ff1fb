"""Marketplace Admin HTTP API."""

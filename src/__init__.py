"""Marketplace admin core: filters, pagination, listings and storage."""

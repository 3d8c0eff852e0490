"""Routers mounted under /studio."""

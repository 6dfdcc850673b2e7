"""Podcatalog - read-only podcast catalog service.

Serves a small relational catalog of podcasts and their episodes
over a JSON HTTP API built on FastAPI.
"""

__version__ = "0.1.0"

"""Rutas de la API."""

from . import lectures

__all__ = ["lectures"]

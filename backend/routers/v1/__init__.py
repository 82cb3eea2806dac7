"""API v1 Route modules."""

from backend.routers.v1 import calculations, reports, share

__all__ = ["calculations", "reports", "share"]

"""
app/api/routers package marker.
"""

from app.api.routers.web_intelligence import router as web_intelligence_router

__all__ = ["web_intelligence_router"]

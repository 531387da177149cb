"""
app/services package marker.
"""

from app.services.web_intelligence_service import (
    WebIntelligenceService,
    get_web_intelligence_service,
)

__all__ = ["WebIntelligenceService", "get_web_intelligence_service"]

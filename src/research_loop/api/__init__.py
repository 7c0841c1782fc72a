"""
Research service HTTP API.

- routes.py: POST /api/research, POST /api/next-inquiry, GET /api/health
- dependencies.py: Dependency injection for the LLM client, generator and retry engine
- models.py: Request/response models (wire format shared with HttpResearchBackend)
- error_handlers.py: Exception handlers producing {"error": ...} bodies
- middleware.py: Request ID tracing
"""

from research_loop.api import dependencies, error_handlers, models
from research_loop.api.routes import router

__all__ = [
    "router",
    "dependencies",
    "error_handlers",
    "models",
]

"""
teamtacles_api.api

API package for the TeamTacles service.

Responsibilities:
- FastAPI app factory and router modules.
- Dependency wiring and the error-kind to HTTP status mapping.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# The API layer stays thin: request validation + auth + delegation to services.

"""
teamtacles_api.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Per-request context and access logging.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services only call `get_logger`; configuration happens once in `api.app`.

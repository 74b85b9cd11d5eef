"""
teamtacles_api.services

Service layer.

Responsibilities:
- Own transactions (commit/rollback) and authorization decisions for each operation.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `errors.DomainError`; they never build HTTP responses.

"""
teamtacles_api.auth

Authentication/authorization package.

Responsibilities:
- JWT helpers and validation.
- Password hashing.
- The access policy deciding who may act on a project.
- FastAPI auth dependencies (Principal + admin guard).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# `models` and `policy` have no FastAPI or DB imports so they can be exercised
# directly in tests.

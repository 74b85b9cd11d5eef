"""
teamtacles_api.db

Persistence package (SQLAlchemy async).

Responsibilities:
- Provide ORM models, engine/session setup, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on repositories, never on raw SQL; swapping the DB backend
# only touches this package.

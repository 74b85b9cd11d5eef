"""
teamtacles_api.clients

Outbound service clients.

Responsibilities:
- Provide client boundaries for calling remote services (the task service).
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services depend on these clients, never on httpx directly.

"""
teacher_ratings.api

API package.

Responsibilities:
- FastAPI app factory and router modules.
- API-layer dependency wiring, the JSON envelope and error rendering.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Routers parse requests, resolve claims and delegate; rules live in `teacher_ratings.services`.

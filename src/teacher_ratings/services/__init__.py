"""
teacher_ratings.services

Service-layer package.

Responsibilities:
- Own transaction boundaries (commit/rollback) and domain rules.
- Translate store-level constraint violations into domain errors.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Services raise `teacher_ratings.errors` types and never import FastAPI.

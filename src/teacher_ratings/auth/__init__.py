"""
teacher_ratings.auth

Authentication/authorization package.

Responsibilities:
- Token issuing and verification (IdentityService).
- Role rules (AccessPolicy) and the FastAPI dependencies built on them.
- Password hashing.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Only `deps.py` imports FastAPI; the rest is plain Python and unit-testable on its own.

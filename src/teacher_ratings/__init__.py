"""
teacher_ratings

Teacher rating service: accounts, a moderated teacher catalogue, and a one-rating-per-user
ledger behind bearer-token auth.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"

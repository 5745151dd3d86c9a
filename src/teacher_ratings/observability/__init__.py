"""
teacher_ratings.observability

structlog configuration, the request-id middleware and response security headers.
"""

"""
teacher_ratings.api.routers

HTTP routers, one module per resource under `/api`.
"""

"""
teacher_ratings.db

SQLAlchemy async persistence: schema (`models`), engine/session factories (`session`),
bootstrap (`init_db`) and per-aggregate repositories.

Store-level constraints (unique (user, teacher) pairs, aggregate bounds, unique teacher
names) live in `models.py`; services rely on them under concurrent requests.
"""

"""
teacher_ratings.db.repositories

One repository per aggregate: users, teachers, ratings, submissions.

Repositories flush but never commit; services own the transaction boundary.
"""

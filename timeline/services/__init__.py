"""Business logic services.

Services contain the feed assembly logic and are called by routes.
Collaborators (cache, comment store) are passed in explicitly so the same
code runs against Redis/PostgreSQL in production and in-memory fakes in tests.
"""

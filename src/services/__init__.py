"""Business logic services used by handlers.

Services are imported lazily by handlers so that importing a handler never
opens a database connection.
"""

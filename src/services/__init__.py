"""Queue transitions and the services that own them.

Handlers reach the shared instances through ``services.registry`` lazily, so
importing a handler never opens a database or AWS connection.
"""

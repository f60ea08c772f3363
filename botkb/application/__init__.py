"""
Application layer.

Service orchestrators consumed by the surrounding HTTP/CRUD layer.
"""

"""Pydantic DTOs returned by the application services."""

"""Pydantic schemas for the server API."""

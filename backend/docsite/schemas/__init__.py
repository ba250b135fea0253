"""Pydantic models shared by the services, middleware and routes."""

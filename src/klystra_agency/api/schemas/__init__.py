"""Request validation and response schemas for the API."""

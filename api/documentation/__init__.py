"""Swagger helpers shared by the API views."""

"""FastAPI application, metrics and system endpoints."""

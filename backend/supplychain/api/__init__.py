"""API Layer — FastAPI routes, dependencies and global error handlers."""

"""FastAPI layer: routers, schemas and dependencies."""

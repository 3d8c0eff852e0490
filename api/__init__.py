"""Training studio HTTP service: FastAPI app, SQLAlchemy models, schemas and services."""

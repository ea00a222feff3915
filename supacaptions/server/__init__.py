"""HTTP API server package (FastAPI app, job store, request/response models)."""

"""HTTP API for the highlight pipeline (FastAPI)."""

"""
API module.

FastAPI application and routers for the document ingestion service.
"""

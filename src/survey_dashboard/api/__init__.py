"""
HTTP layer.

This package contains:
- app: FastAPI application serving records and summaries per survey type
"""

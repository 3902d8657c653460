# task_api/routers/__init__.py
"""API routers for Task API."""

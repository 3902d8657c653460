# task_api/models/__init__.py
"""Database models for Task API."""

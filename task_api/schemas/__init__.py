# task_api/schemas/__init__.py
"""Pydantic schemas for Task API."""

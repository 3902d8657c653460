# task_api/core/__init__.py
"""Core modules for Task API."""

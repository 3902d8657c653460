# task_api/__init__.py
"""Task API - project and task management service."""

__version__ = "1.0.0"
__author__ = "Task Manager Team"

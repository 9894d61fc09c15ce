# backend/app/tasks/__init__.py
"""
Celery tasks package.

Task modules are registered through ``celery_app.conf.imports`` so that
importing this package never pulls in the service layer.
Run workers with: celery -A app.tasks worker -Q notifications -B
"""

from app.tasks.celery_app import BaseTask, celery_app

__all__ = ["celery_app", "BaseTask"]

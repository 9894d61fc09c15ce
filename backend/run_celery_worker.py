#!/usr/bin/env python3
# backend/run_celery_worker.py
"""
Development Celery worker runner.

Consumes the ``notifications`` queue and embeds beat (``-B``) so the
reminder scan runs without a separate process.
"""
import os
from pathlib import Path
import subprocess
import sys

# Add backend to path
backend_dir = Path(__file__).parent
sys.path.insert(0, str(backend_dir))
os.chdir(backend_dir)

if __name__ == "__main__":
    queues = os.getenv("CELERY_QUEUES") or "notifications,celery"
    print(f"🚀 Starting Celery worker with beat; queues: {queues}")

    cmd = [
        sys.executable,
        "-m",
        "celery",
        "-A",
        "app.tasks.celery_app",
        "worker",
        "-B",
        "--loglevel=info",
        "--concurrency=2",
        "-Q",
        queues,
    ]
    sys.exit(subprocess.call(cmd))

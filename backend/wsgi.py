"""WSGI entry point (runs with gunicorn)."""

from app import create_app, start_scheduler

app = create_app(scheduler=start_scheduler())

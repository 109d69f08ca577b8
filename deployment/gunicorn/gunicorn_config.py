"""
Gunicorn configuration for the Contact Registration Service.

Usage:
    gunicorn core.wsgi:application -c deployment/gunicorn/gunicorn_config.py
"""
import multiprocessing
import os

bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "sync"
max_requests = 1000
max_requests_jitter = 100

# Each request waits on SMTP and the SMS provider in turn
timeout = int(os.getenv("GUNICORN_TIMEOUT", 120))
keepalive = 5

# Logging
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

proc_name = "contact-registration"


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Contact registration service ready, spawning workers")


def worker_abort(worker):
    """Called when a worker times out mid-request."""
    worker.log.warning("Worker aborted; a request may have stored a record without notifying")

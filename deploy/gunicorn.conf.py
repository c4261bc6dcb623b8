"""
Gunicorn configuration for the jwtsession demo app.
All settings are driven from environment variables for container deployment.

    gunicorn -c deploy/gunicorn.conf.py jwtsession.wsgi:app
"""

from __future__ import annotations

import logging
import multiprocessing
import os

# ===== Server Binding =====
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8080")

# ===== Worker Settings =====
# gthread keeps each worker's session store shared across its threads.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(multiprocessing.cpu_count() * 2 + 1)))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "10000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "1000"))

# ===== Timeout Settings =====
# Matches the HTTP server's read/write timeouts.
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "10"))
# In-flight requests get this long to finish after SIGTERM/SIGINT.
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "5"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging Configuration =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")  # stdout
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")    # stderr
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "request": "%(r)s", '
    '"status": %(s)s, "bytes": %(b)s, "response_time": %(D)s, "pid": %(p)s}',
)

# ===== Security Settings =====
# Up to three session cookies (4 KB each) share one Cookie header.
limit_request_line = int(os.environ.get("GUNICORN_LIMIT_REQUEST_LINE", "8190"))
limit_request_fields = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELDS", "100"))
limit_request_field_size = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELD_SIZE", "16380"))

proc_name = os.environ.get("GUNICORN_PROC_NAME", "jwtsession")


# ===== Lifecycle Hooks =====
def when_ready(server):
    """Called just after the server is started."""
    logger = logging.getLogger(__name__)
    logger.info(f"Gunicorn ready. Listening on {bind}")


def on_exit(server):
    """Called just before exiting Gunicorn."""
    logger = logging.getLogger(__name__)
    logger.info("Server exiting")


def worker_int(worker):
    """Handle SIGINT on worker."""
    logger = logging.getLogger(__name__)
    logger.info(f"Worker {worker.pid} shutting down")


def worker_abort(worker):
    """Called when a worker is timed out and is being replaced."""
    logger = logging.getLogger(__name__)
    logger.warning(f"Worker {worker.pid} timed out (>{timeout}s), aborting")

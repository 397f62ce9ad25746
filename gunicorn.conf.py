"""Gunicorn config: `gunicorn findash.main:app -c gunicorn.conf.py`."""
import os

bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Each worker loads its own copy of the transaction frame at startup
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "1"))

timeout = 60
graceful_timeout = 30

accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("FINDASH_LOG_LEVEL", "info").lower()

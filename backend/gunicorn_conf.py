# backend/gunicorn_conf.py

# Gunicorn config file: gunicorn -c gunicorn_conf.py buddy.main:app

import os

bind = os.getenv("BIND", "0.0.0.0:8000")
workers = int(os.getenv("WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"

# A turn may wait on two oracle calls (primary plus fallback); stay above
# REQUEST_TIMEOUT_SECONDS so the app answers 504 before gunicorn kills the worker.
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
graceful_timeout = 20
keepalive = 5

# Behind the reverse proxy that also serves the browser client
forwarded_allow_ips = os.getenv("FORWARDED_ALLOW_IPS", "*")

# Logs go to stdout/stderr; the app's own records are formatted by structlog.
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

"""Gunicorn configuration for the WeCom relay."""

import os

# A relayed request makes two sequential upstream calls, each bounded by
# UPSTREAM_TIMEOUT; the worker timeout must outlast both.
upstream_timeout = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

bind = f"{os.getenv('SERVICE_HOST', '0.0.0.0')}:{os.getenv('SERVICE_PORT', '3000')}"
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
worker_class = "uvicorn.workers.UvicornWorker"
worker_tmp_dir = "/dev/shm"
timeout = int(os.getenv("GUNICORN_TIMEOUT", str(int(2 * upstream_timeout) + 30)))
graceful_timeout = 30
keepalive = 5
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
proc_name = "wecom_relay"
# Import the app in the master before binding: missing settings stop startup.
preload_app = True
max_requests = 1000
max_requests_jitter = 50

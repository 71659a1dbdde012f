import os

wsgi_app = "wsgi:app"

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.getenv("GUNICORN_WORKERS", "2"))
threads = 1
timeout = 60
graceful_timeout = 30
keepalive = 5

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# ProxyFix in the app decides which forwarded hops are trusted
forwarded_allow_ips = "*"
proxy_protocol = False

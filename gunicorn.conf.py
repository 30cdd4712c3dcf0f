import os

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
workers = int(os.getenv('GUNICORN_WORKERS', '2'))
threads = int(os.getenv('GUNICORN_THREADS', '4'))
worker_class = os.getenv('GUNICORN_WORKER_CLASS', 'gthread')
# uploads are proxied synchronously to the backend, so keep the timeout generous
timeout = int(os.getenv('GUNICORN_TIMEOUT', '300'))
graceful_timeout = 30
keepalive = 5
max_requests = 2000
max_requests_jitter = 100
accesslog = '-'
errorlog = '-'
loglevel = os.getenv('GUNICORN_LOG_LEVEL', 'info')
wsgi_app = 'app:app'

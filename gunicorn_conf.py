import multiprocessing

# Gunicorn config
# Run with: gunicorn admin_portal.main:app -c gunicorn_conf.py
bind = "0.0.0.0:8000"  # Match this port in your ALB target group
# Each worker owns its own connection pool (DB_POOL_SIZE connections)
workers = min(multiprocessing.cpu_count() * 2 + 1, 4)
worker_class = "uvicorn.workers.UvicornWorker"
loglevel = "info"
accesslog = "/var/log/gunicorn/access.log"
errorlog = "/var/log/gunicorn/error.log"

import multiprocessing
import os

# Gunicorn configuration file
# For FastAPI/Uvicorn, we use the UvicornWorker

# The app factory builds the app; its lifespan creates the tables before
# the worker starts accepting requests
wsgi_app = "taskmaster.main:create_app()"

# Bind to all interfaces, port from the environment for hosted deployments
bind = f"0.0.0.0:{os.getenv('PORT', '8000')}"

# Worker configuration
# Standard formula: (2 x num_cores) + 1
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "uvicorn.workers.UvicornWorker"

# Timeout and Keepalive
timeout = 120
keepalive = 5

# Logging
accesslog = "-" # Log to stdout
errorlog = "-"  # Log to stderr
loglevel = "info"

# Process management
name = "taskmaster_api"
reload = False  # Set to True for development only

import multiprocessing
import os
import sys

# Make es2tabular and wsgi importable when started from the repo root
sys.path.append(os.getcwd())

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"

# Flattening is CPU-bound and synchronous; Kibana calls are bounded by KibanaSettings.timeout
workers = int(os.getenv("WEB_CONCURRENCY", multiprocessing.cpu_count() + 1))
worker_class = "sync"
timeout = int(os.getenv("GUNICORN_TIMEOUT", "120"))

accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

proc_name = "es2tabular"
preload_app = True


def on_starting(server):
    """
    Make sure the data directory is usable before any worker is forked.
    """
    from es2tabular.settings import load_config
    from es2tabular.models.storage import StorageSettings

    try:
        config_data = load_config()
        storage = StorageSettings.model_validate(config_data.get("storage", {}))
        storage.data_dir.mkdir(parents=True, exist_ok=True)
        server.log.info(f"Data directory: {storage.data_dir.resolve()}")
    except Exception as e:
        server.log.error(f"Startup check failed: {e}")
        sys.exit(1)

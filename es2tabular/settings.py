import json
import logging
import os
from pathlib import Path
from typing import Union


def load_config(path: Union[str, Path, None] = None) -> dict:
    """
    Loads config.json (or $ES2TABULAR_CONFIG). A missing file is an empty
    config so the service can run on environment variables alone.
    """
    path = Path(path or os.getenv("ES2TABULAR_CONFIG", "config.json"))
    if not path.exists():
        return {}
    with path.open(encoding="utf-8") as f:
        cfg = json.load(f)

    return cfg


def configure_logging(config_data: dict) -> None:
    level = str(config_data.get("log_level", os.getenv("LOG_LEVEL", "INFO"))).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

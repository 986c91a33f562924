import os
import json
import datetime as dt
import logging
from logging.handlers import TimedRotatingFileHandler
from typing import Optional

import yaml
from jsonschema import validate, Draft202012Validator
from jsonschema.exceptions import ValidationError

from readdedup.errors import ConfigError

# ---------- Config loading & validation ----------

def load_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()

def load_config(path: str) -> dict:
    """Load a YAML run config. An empty file yields an empty dict."""
    try:
        cfg = yaml.safe_load(load_file(path))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot load config {path}: {e}") from e
    if cfg is None:
        return {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg

def validate_config(cfg: dict):
    here = os.path.dirname(os.path.abspath(__file__))
    schema_path = os.path.join(here, "schemas", "config.schema.json")
    schema = json.loads(load_file(schema_path))
    try:
        validate(instance=cfg, schema=schema, cls=Draft202012Validator)
    except ValidationError as e:
        raise ConfigError(f"Config validation error: {e.message} at {list(e.path)}") from e

# ---------- Logging ----------

_LOGGER_INITIALIZED = False

class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "ts": dt.datetime.fromtimestamp(record.created, dt.timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False)

def _build_logger():
    global _LOGGER_INITIALIZED
    if _LOGGER_INITIALIZED:
        return

    level = os.getenv("LOG_LEVEL", "INFO").upper()
    # Empty LOG_DIR keeps logging on stderr only
    log_dir = os.getenv("LOG_DIR", "logs")
    json_mode = os.getenv("LOG_JSON", "false").lower() == "true"

    logger = logging.getLogger()
    logger.setLevel(getattr(logging, level, logging.INFO))

    if json_mode:
        fmt = JsonFormatter()
    else:
        fmt = logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")

    ch = logging.StreamHandler()
    ch.setLevel(logger.level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    if log_dir:
        os.makedirs(log_dir, exist_ok=True)
        fh = TimedRotatingFileHandler(os.path.join(log_dir, "read-dedup.log"), when="D", backupCount=7, encoding="utf-8")
        fh.setLevel(logger.level)
        fh.setFormatter(fmt)
        logger.addHandler(fh)

    _LOGGER_INITIALIZED = True

def get_logger(name: Optional[str] = None) -> logging.Logger:
    _build_logger()
    return logging.getLogger(name if name else __name__)

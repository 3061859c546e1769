import json
import logging
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

# stdlib names for the server's level vocabulary
_LEVELS = {"error": logging.ERROR, "warn": logging.WARNING, "info": logging.INFO, "debug": logging.DEBUG}


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": time.strftime('%Y-%m-%dT%H:%M:%S', time.gmtime(record.created)),
            "lvl": record.levelname.lower(),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            base.update(extra)
        if record.exc_info:
            base["error"] = str(record.exc_info[1])
        return json.dumps(base, ensure_ascii=False, default=str)


def configure_logger(name: str, level: str = "info", log_dir: Optional[str] = None, filename: Optional[str] = None) -> logging.Logger:
    """Attach a stderr JSON handler (and a rotating file, if possible) once per logger.

    stdout is never used: the stdio transport owns it.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()  # stderr
        h.setFormatter(JSONFormatter())
        logger.addHandler(h)
        if log_dir and filename:
            try:
                path = Path(log_dir)
                path.mkdir(parents=True, exist_ok=True)
                fh = RotatingFileHandler(path / filename, maxBytes=10_000_000, backupCount=5)
                fh.setFormatter(JSONFormatter())
                logger.addHandler(fh)
            except OSError:
                pass
    logger.setLevel(_LEVELS.get(level, logging.INFO))
    return logger

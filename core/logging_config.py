from pathlib import Path
import logging
import os
import sys
from typing import Optional
from datetime import datetime

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def setup_logging(logs_dir: Optional[str | Path] = None, log_file_name: str = "roadmap-server.log") -> logging.Logger:
    """Configure root logging to stdout and a timestamped file under `logs_dir`.

    Idempotent: calling it again won't add duplicate handlers. The level comes
    from the LOG_LEVEL environment variable (default INFO).
    """
    if logs_dir is None:
        logs_dir = Path(__file__).resolve().parent.parent / "logs"
    else:
        logs_dir = Path(logs_dir)

    level_name = os.environ.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    has_file_handler = any(isinstance(h, logging.FileHandler) for h in root_logger.handlers)
    if not has_file_handler:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        name = Path(log_file_name)
        log_file = logs_dir / f"{name.stem}_{timestamp}{name.suffix or '.log'}"
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            root_logger.addHandler(fh)
        except OSError:
            # read-only filesystem (e.g. container): stdout only
            pass

    has_stdout_handler = any(
        type(h) is logging.StreamHandler and getattr(h, "stream", None) is sys.stdout
        for h in root_logger.handlers
    )
    if not has_stdout_handler:
        sh = logging.StreamHandler(sys.stdout)
        sh.setFormatter(formatter)
        root_logger.addHandler(sh)

    # httpx logs every request at INFO; the fetcher already does
    logging.getLogger("httpx").setLevel(logging.WARNING)

    return logging.getLogger("roadmap")

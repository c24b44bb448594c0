from pathlib import Path
import logging
import sys
from typing import Optional
from datetime import datetime


def setup_logging(
    logs_dir: Optional[str | Path] = None,
    log_file_name: str = "server.log",
    level: str | int = logging.INFO,
) -> logging.Logger:
    """Configure root logging to stderr and a file under `logs_dir` (default ~/.ghl-mcp/logs).

    Idempotent: calling multiple times won't add duplicate handlers.
    stdout is reserved for the stdio MCP transport, so console output goes to stderr.
    Returns a module-level logger for callers to use.
    """
    if logs_dir is None:
        logs_dir = Path.home() / ".ghl-mcp" / "logs"
    else:
        logs_dir = Path(logs_dir)

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # formatter used by both handlers
    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    # One timestamped log file per process; skip if a file handler already exists
    file_handler_exists = any(isinstance(h, logging.FileHandler) for h in root_logger.handlers)
    if not file_handler_exists:
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        base = Path(log_file_name).stem
        ext = Path(log_file_name).suffix or ".log"
        log_file = logs_dir / f"{base}_{timestamp}{ext}"
        try:
            logs_dir.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(log_file, encoding="utf-8")
            fh.setFormatter(formatter)
            fh.setLevel(level)
            root_logger.addHandler(fh)
        except OSError:
            # If the log file cannot be created (permissions, read-only fs), keep stderr only
            root_logger.warning("Could not create log file under %s; logging to stderr only", logs_dir)

    # Ensure a StreamHandler to stderr exists (don't duplicate)
    stream_stderr_exists = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in root_logger.handlers
    )
    if not stream_stderr_exists:
        sh = logging.StreamHandler(sys.stderr)
        sh.setFormatter(formatter)
        sh.setLevel(level)
        root_logger.addHandler(sh)

    # Return a logger for the current module
    return logging.getLogger(__name__)

# xpcard/utils/logger.py - Unicode-safe logger for the card renderer
import logging
import sys
from pathlib import Path

LOG_DIR = Path("logs")
LOG_FILE = "xp_card.log"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class UnicodeStreamHandler(logging.StreamHandler):
    """Stream handler that survives usernames a console codec cannot encode"""

    def __init__(self, stream=None):
        super().__init__(stream)

        # Ensure UTF-8 encoding on Windows
        if sys.platform == "win32" and hasattr(self.stream, "reconfigure"):
            try:
                self.stream.reconfigure(encoding="utf-8", errors="replace")
            except (AttributeError, OSError):
                pass

    def emit(self, record):
        """Emit a record, re-encoding with replacement on failure"""
        try:
            super().emit(record)
        except UnicodeEncodeError:
            msg = self.format(record)
            encoding = getattr(self.stream, "encoding", None) or "ascii"
            safe = msg.encode(encoding, errors="replace").decode(encoding)
            self.stream.write(safe + self.terminator)
            self.flush()


def _file_handler() -> logging.Handler:
    LOG_DIR.mkdir(exist_ok=True)
    handler = logging.FileHandler(LOG_DIR / LOG_FILE, encoding="utf-8", mode="a")
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    return handler


def get_logger(name: str) -> logging.Logger:
    """Get a Unicode-safe logger instance"""
    logger = logging.getLogger(name)
    logger.setLevel(logging.INFO)

    if not logger.handlers:
        stream_handler = UnicodeStreamHandler(sys.stdout)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        logger.addHandler(stream_handler)

        try:
            logger.addHandler(_file_handler())
        except OSError as e:
            # Read-only working directory: console logging only
            logger.warning(f"File logging disabled: {e}")

    return logger

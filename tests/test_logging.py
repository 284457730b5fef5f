# tests/test_logging.py
import logging
from logging.handlers import RotatingFileHandler

from raster_proj.config import Config
from raster_proj.logging_conf import setup_logging


def test_file_logging(tmp_path):
    log_file = tmp_path / "raster_proj.log"
    cfg = Config.load()
    cfg.update({"logging": {"file": str(log_file), "level": "DEBUG"}})
    root = logging.getLogger()
    setup_logging(cfg)
    handlers = [h for h in root.handlers
                if isinstance(h, RotatingFileHandler) and h.baseFilename == str(log_file)]
    try:
        assert len(handlers) == 1
        assert logging.getLogger("raster_proj").level == logging.DEBUG
        assert logging.getLogger("PIL").level == logging.INFO
        logging.getLogger("raster_proj.bbox").warning("window %s", "w1")
        handlers[0].flush()
        text = log_file.read_text(encoding="utf-8")
        assert "[WARNING] window w1" in text
    finally:
        for h in handlers:
            root.removeHandler(h)
            h.close()
        logging.getLogger("raster_proj").setLevel(logging.NOTSET)


def test_level_override():
    setup_logging(Config.load(), "warning")
    try:
        assert logging.getLogger("raster_proj").level == logging.WARNING
    finally:
        logging.getLogger("raster_proj").setLevel(logging.NOTSET)

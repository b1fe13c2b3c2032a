# config/logging_config.py
import logging
import logging.handlers
from pathlib import Path
from typing import List

LOGS_DIR = Path(__file__).parent.parent / "logs"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-15s | %(funcName)-20s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Библиотеки, которые пишут каждый HTTP-запрос и апдейт
QUIET_LOGGERS = ("httpx", "httpcore", "telegram")


def _build_handlers(log_dir: Path, formatter: logging.Formatter) -> List[logging.Handler]:
    # app.log: всё, с ротацией 10 МБ × 5 файлов
    app_handler = logging.handlers.RotatingFileHandler(
        log_dir / "app.log",
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8"
    )
    app_handler.setLevel(logging.DEBUG)

    # errors.log: только сбои API и хранилища
    error_handler = logging.FileHandler(log_dir / "errors.log", encoding="utf-8")
    error_handler.setLevel(logging.ERROR)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)

    handlers = [app_handler, error_handler, console_handler]
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def setup_logging(log_level: str = "INFO", log_dir: Path = LOGS_DIR) -> logging.Logger:
    """Настраивает корневой логгер один раз: повторный вызов меняет только уровень."""
    log_dir.mkdir(parents=True, exist_ok=True)

    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if not root.handlers:
        formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)
        for handler in _build_handlers(log_dir, formatter):
            root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info("🔧 Логирование инициализировано")
    return root

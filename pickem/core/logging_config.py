"""
Configuración de logging de la app

Un solo handler de consola en el root logger; cada módulo usa
logging.getLogger(__name__).
"""

import logging

from pickem.core.config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(settings: Settings) -> None:
    """Configura el root logger según settings.log_level (DEBUG si debug=True)"""
    level_name = "DEBUG" if settings.debug else settings.log_level.upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Evita handlers duplicados si se llama más de una vez (reload, tests)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    # motor/pymongo son muy verbosos en DEBUG
    logging.getLogger("pymongo").setLevel(max(log_level, logging.WARNING))

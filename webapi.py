"""
Основной backend витрины (FastAPI).
Приложение: webapi:app
"""

from config import get_settings
from utils.logging_config import API_LOG_FILE, setup_logging

from api.main import create_app


SETTINGS = get_settings()

setup_logging(SETTINGS.log_level, log_file=SETTINGS.log_file or API_LOG_FILE)

app = create_app(SETTINGS)


__all__ = ["app"]

import os
import logging
from dotenv import load_dotenv

# Загрузка .env
load_dotenv()

# База данных
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///commission.db")

# Логирование
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Защита от циклов в цепочке супервайзеров
MAX_HIERARCHY_DEPTH = int(os.getenv("MAX_HIERARCHY_DEPTH", "1000"))


def setupLogging():
    """Configure root logging from LOG_LEVEL."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

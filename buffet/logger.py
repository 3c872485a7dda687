import logging
import os
from logging.handlers import TimedRotatingFileHandler

logger = logging.getLogger("buffet")
logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

LOG_DIR = os.getenv("LOG_DIR")

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)
    handler = TimedRotatingFileHandler(
        filename=os.path.join(LOG_DIR, "app.log"),
        when="midnight",
        interval=1,
        backupCount=7,
        encoding="utf-8",
    )
else:
    handler = logging.StreamHandler()

formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
handler.setFormatter(formatter)

logger.addHandler(handler)

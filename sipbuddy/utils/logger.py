import logging
import os

LOG_LEVEL = os.environ.get("SIPBUDDY_LOG_LEVEL", "INFO").upper()

logger = logging.getLogger("sipbuddy")
if not logger.handlers:
    logger.setLevel(LOG_LEVEL)
    ch = logging.StreamHandler()
    fmt = logging.Formatter("[%(asctime)s] [%(levelname)s] [%(module)s] %(message)s")
    ch.setFormatter(fmt)
    logger.addHandler(ch)

# core/log_manager.py
import sys
from loguru import logger

from flashstudy.config import LOG_LEVEL, LOG_FILE

LOG_FORMAT = "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{line}</cyan> - {message}"

# Replace loguru's default handler so the level comes from the environment
logger.remove()
logger.add(sys.stderr, level=LOG_LEVEL, format=LOG_FORMAT)

if LOG_FILE:
    logger.add(LOG_FILE, level=LOG_LEVEL, rotation="5 MB", retention=3, encoding="utf-8")

__all__ = ["logger"]

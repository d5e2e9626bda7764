import sys
from pathlib import Path

from loguru import logger

log_dir = Path("logs")
log_file = log_dir / "{time}.log"

logger.remove()
logger.add(
    sys.stderr,
    level="INFO",
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
)
logger.add(
    log_file,
    rotation="256 MB",  # 每個檔案滿 256MB 就切分
    retention="10 days",  # 只保留最近 10 天的日誌
    compression="zip",
    encoding="utf-8",
    level="DEBUG",
    enqueue=True,
)

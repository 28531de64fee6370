from loguru import logger

from core.config import settings

logger.add(
    settings.log_file,
    rotation=settings.log_rotation,
    retention=settings.log_retention,
    serialize=True,
)

__all__ = ["logger"]

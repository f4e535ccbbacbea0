import logging
from typing import Optional

from .config import Config, config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(cfg: Optional[Config] = None) -> int:
    """Configure the root logger from ANSWERSCOPE_LOG_LEVEL / ANSWERSCOPE_DEBUG"""
    cfg = cfg or config
    level = logging.DEBUG if cfg.enable_debug else getattr(logging, cfg.log_level, logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    return level

import logging

from helpers.settings import LOG_LEVEL


def configure_logging(level: str = LOG_LEVEL) -> None:
    resolved_level = getattr(logging, level, logging.INFO)
    logging.basicConfig(
        level=resolved_level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    # tortoise logs every SQL statement at DEBUG
    logging.getLogger("tortoise").setLevel(max(resolved_level, logging.INFO))

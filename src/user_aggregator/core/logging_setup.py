import logging


def setup_logging(level_name: str = "INFO") -> None:
    level = getattr(logging, (level_name or "INFO").upper(), None)
    if not isinstance(level, int):
        level = logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

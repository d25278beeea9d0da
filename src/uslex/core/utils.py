import logging
from typing import Optional

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


def set_logging_level(
    level: int,
    service_name: Optional[str] = None,
    environment: Optional[str] = None,
) -> None:
    """Set logging level for all uslex loggers.

    Args:
        level: The logging level to set
        service_name: Name of the service (e.g., "api", "pipeline")
        environment: Environment name (e.g., "localhost", "dev", "prod")
    """
    loggers = [logging.getLogger(name) for name in logging.root.manager.loggerDict]
    for logger in loggers:
        if "uslex" in logger.name or "backend" in logger.name or "__main__" == logger.name:
            logger.setLevel(level)

    logging.basicConfig(format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    if service_name:
        logging.getLogger(__name__).debug(
            f"Logging configured for {service_name}",
            extra={"service_name": service_name, "environment": environment},
        )


def load_html_file_to_soup(filepath: str) -> BeautifulSoup:
    """Load an HTML file and return a BeautifulSoup object."""
    with open(filepath, "r", encoding="utf-8") as f:
        return BeautifulSoup(f.read(), "html.parser")


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so a value matches literally under ESCAPE '\\'."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")

import json
import logging
import os
from glob import glob
from typing import Any

from pydantic import ValidationError

from uslex.core.exceptions import ConfigurationError
from uslex.core.store import ProvisionStore
from uslex.legislation.models import SeedFile
from uslex.requirements.loader import load_classifications
from uslex.settings import CLASSIFICATIONS_FILE

logger = logging.getLogger(__name__)


class SeedLoader:
    """Reads seed files from the seed directory."""

    def __init__(self, seed_dir: str):
        if not os.path.isdir(seed_dir):
            raise ConfigurationError(f"Seed directory not found at {seed_dir}")
        self.seed_dir = seed_dir

    def seed_files(self) -> list[str]:
        """Every jurisdiction seed file, in name order. The classifications file is not one."""
        return sorted(
            path
            for path in glob(os.path.join(self.seed_dir, "*.json"))
            if os.path.basename(path) != CLASSIFICATIONS_FILE
        )

    def load(self, path: str) -> SeedFile:
        with open(path, "r", encoding="utf-8") as f:
            return SeedFile(**json.load(f))


def build_store(db_path: str, seed_dir: str) -> dict[str, Any]:
    """Build or update the provision database from the seed directory.

    Each seed file is written in its own transaction, so one malformed file
    is skipped without affecting the others. Classified requirements are
    loaded afterwards, since they reference the documents.

    Returns:
        The refreshed database metadata

    Raises:
        ConfigurationError: If the seed directory does not exist
    """
    loader = SeedLoader(seed_dir)

    with ProvisionStore(db_path) as store:
        for path in loader.seed_files():
            try:
                seed = loader.load(path)
            except (ValidationError, json.JSONDecodeError) as e:
                logger.warning(
                    f"Skipping invalid seed file {path}: {e}",
                    extra={"path": path, "error_type": type(e).__name__},
                )
                continue

            documents, provisions = store.ingest_seed(seed)
            logger.info(
                f"Loaded {path}: {documents} documents, {provisions} provisions",
                extra={"path": path, "documents": documents, "provisions": provisions},
            )

        load_classifications(store, os.path.join(seed_dir, CLASSIFICATIONS_FILE))
        metadata = store.refresh_metadata()

    logger.info(f"Built {db_path}", extra={"db_path": db_path, **metadata})
    return metadata

import json
import logging
import os
import tempfile
from typing import Iterator, Optional

from uslex.core.http import HttpClient
from uslex.core.pipeline_utils import PipelineMonitor
from uslex.legislation.manifest import load_manifest
from uslex.legislation.models import SeedFile
from uslex.legislation.scraper import StatuteScraper
from uslex.settings import MANIFEST_PATH

logger = logging.getLogger(__name__)


@PipelineMonitor(doc_type="seed_file", track_progress=True)
def pipe_states(
    states: Optional[list[str]] = None,
    limit: Optional[int] = None,
    manifest_path: str = MANIFEST_PATH,
    http_client: Optional[HttpClient] = None,
    **kwargs,
) -> Iterator[SeedFile]:
    """Yield one seed file per manifest jurisdiction that produced any provisions.

    Raises:
        ConfigurationError: If the manifest is missing or names none of ``states``
    """
    targets = load_manifest(manifest_path, states)
    if limit is not None:
        targets = targets[:limit]

    scraper = StatuteScraper(http_client)
    for target, seed in zip(targets, scraper.load_content(targets)):
        if not seed.documents:
            logger.warning(
                f"No statutes extracted for {target.code}, seed file not written",
                extra={"jurisdiction": target.code},
            )
            continue
        yield seed


def seed_path(seed_dir: str, jurisdiction: str) -> str:
    return os.path.join(seed_dir, f"{jurisdiction.lower()}.json")


def write_seed(seed: SeedFile, seed_dir: str) -> str:
    """Write a seed file as ``{jurisdiction}.json``, replacing any previous one atomically.

    Returns:
        The path written
    """
    if not seed.documents:
        raise ValueError("Cannot write a seed file with no documents")

    os.makedirs(seed_dir, exist_ok=True)
    path = seed_path(seed_dir, seed.documents[0].jurisdiction)
    payload = seed.model_dump(mode="json", exclude={"documents": {"__all__": {"id", "created_at"}}})

    fd, tmp_path = tempfile.mkstemp(dir=seed_dir, prefix=".seed-", suffix=".json.tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2, ensure_ascii=False)
            f.write("\n")
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)
        raise

    logger.info(
        f"Wrote {path} ({len(seed.documents)} documents, {len(seed.provisions)} provisions)",
        extra={"path": path, "documents": len(seed.documents), "provisions": len(seed.provisions)},
    )
    return path

"""Monitoring for ingest generators."""

import logging
import time
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Dict, Iterator, TypeVar

T = TypeVar("T")

MONITORED_PARAMS = ("states", "limit")


@dataclass
class IngestTally:
    """Running totals for one pipeline run."""

    started: float = field(default_factory=time.monotonic)
    items: int = 0
    documents: int = 0
    provisions: int = 0
    jurisdictions: list[str] = field(default_factory=list)

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started

    def add(self, item: Any) -> Dict[str, Any]:
        """Count ``item`` and return the fields worth logging about it."""
        self.items += 1
        fields: Dict[str, Any] = {}
        documents = getattr(item, "documents", None) or []
        provisions = getattr(item, "provisions", None) or []
        if documents:
            jurisdiction = documents[0].jurisdiction
            self.jurisdictions.append(jurisdiction)
            fields["jurisdiction"] = jurisdiction
        self.documents += len(documents)
        self.provisions += len(provisions)
        fields["documents"] = len(documents)
        fields["provisions"] = len(provisions)
        return fields

    def summary(self) -> Dict[str, Any]:
        return {
            "total_items": self.items,
            "total_documents": self.documents,
            "total_provisions": self.provisions,
            "jurisdictions": ",".join(self.jurisdictions),
            "elapsed_seconds": round(self.elapsed, 2),
        }


class PipelineMonitor:
    """Decorator that logs start, per-item, progress and completion events of an ingest generator.

    Args:
        doc_type: What the pipeline yields, e.g. ``seed_file``
        track_progress: Whether to log periodic progress lines
        progress_interval: Seconds between progress lines
    """

    def __init__(self, doc_type: str, track_progress: bool = True, progress_interval: int = 10):
        self.doc_type = doc_type
        self.track_progress = track_progress
        self.progress_interval = progress_interval

    def __call__(self, func: Callable[..., Iterator[T]]) -> Callable[..., Iterator[T]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Iterator[T]:
            logger = logging.getLogger(func.__module__)
            params = {key: kwargs[key] for key in MONITORED_PARAMS if kwargs.get(key) is not None}
            tally = IngestTally()
            last_report = tally.started

            logger.info(
                f"Starting {self.doc_type} pipeline",
                extra={"doc_type": self.doc_type, "pipeline_status": "started", **params},
            )
            try:
                for item in func(*args, **kwargs):
                    fields = tally.add(item)
                    logger.info(
                        f"Processed {self.doc_type} {tally.items}",
                        extra={"doc_type": self.doc_type, "processing_status": "success", **fields},
                    )
                    now = time.monotonic()
                    if self.track_progress and now - last_report >= self.progress_interval:
                        logger.info(
                            f"Pipeline progress: {tally.items} {self.doc_type}, "
                            f"{tally.provisions} provisions",
                            extra={"doc_type": self.doc_type, "pipeline_status": "in_progress"},
                        )
                        last_report = now
                    yield item
            except Exception as e:
                logger.error(
                    f"Pipeline failure in {self.doc_type}: {e}",
                    exc_info=True,
                    extra={
                        "doc_type": self.doc_type,
                        "pipeline_status": "failed",
                        "error_type": type(e).__name__,
                    },
                )
                raise
            finally:
                logger.info(
                    f"Completed {self.doc_type} pipeline: {tally.items} items, "
                    f"{tally.provisions} provisions in {tally.elapsed:.2f}s",
                    extra={
                        "doc_type": self.doc_type,
                        "pipeline_status": "completed",
                        **tally.summary(),
                        **params,
                    },
                )

        return wrapper

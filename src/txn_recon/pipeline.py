"""
Upload session and the asynchronous boundary around reconciliation.

The engine itself is synchronous; callers that want to show a pending
state (a spinner, a web request awaiting work) go through
``reconcile_async`` instead.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional
import asyncio
import logging

from .config import ReconConfig
from .matching.engine import ReconciliationEngine
from .models.transaction import (
    RecordSource,
    ReconciliationResult,
    ReconciliationSummary,
    UploadedCollection,
    ValidatedCollection,
)
from .parsers.csv_parser import TransactionCsvParser
from .utils.exceptions import MissingCollectionError
from .validation.validator import ValidationFailure, validate

logger = logging.getLogger(__name__)


class ReconciliationSession:
    """
    Holds the latest validated upload for each side.

    Loading a file for a side replaces whatever was loaded for that side
    before; the other side is left alone. A failed load leaves the
    previous upload in place.
    """

    def __init__(
        self,
        config: Optional[ReconConfig] = None,
        parser: Optional[TransactionCsvParser] = None,
    ):
        self.config = config or ReconConfig()
        self.parser = parser or TransactionCsvParser(self.config)
        self.engine = ReconciliationEngine(self.config)
        self._uploads: dict[RecordSource, tuple[UploadedCollection, ValidatedCollection]] = {}

    def load(self, file_path: Path, source: RecordSource) -> UploadedCollection:
        """
        Parse and validate a file, then store it for its side.

        Raises:
            CsvParseError: If the file cannot be read
            ValidationError: If the records fail validation
        """
        upload = self.parser.parse_file(file_path, source)
        return self.accept(upload)

    def accept(self, upload: UploadedCollection) -> UploadedCollection:
        """Validate an already-parsed upload and store it for its side."""
        outcome = validate(upload.records, label=upload.source.value)
        if isinstance(outcome, ValidationFailure):
            raise outcome.to_exception()

        self._uploads[upload.source] = (upload, outcome)
        logger.info(f"Loaded {len(upload)} {upload.source.value} records from {upload.name}")
        return upload

    @property
    def internal(self) -> Optional[UploadedCollection]:
        entry = self._uploads.get(RecordSource.INTERNAL)
        return entry[0] if entry else None

    @property
    def provider(self) -> Optional[UploadedCollection]:
        entry = self._uploads.get(RecordSource.PROVIDER)
        return entry[0] if entry else None

    @property
    def ready(self) -> bool:
        return len(self._uploads) == 2

    def run(self) -> tuple[ReconciliationResult, ReconciliationSummary]:
        """
        Reconcile the currently loaded uploads.

        Returns:
            Tuple of (result, summary)

        Raises:
            MissingCollectionError: If either side has not been loaded
        """
        if not self.ready:
            raise MissingCollectionError("Please upload both files before reconciling")

        internal_upload, internal = self._uploads[RecordSource.INTERNAL]
        provider_upload, provider = self._uploads[RecordSource.PROVIDER]

        start_time = datetime.now()
        result = self.engine.reconcile(internal, provider)
        processing_time = (datetime.now() - start_time).total_seconds()

        summary = self.engine.generate_summary(
            internal=internal,
            provider=provider,
            result=result,
            internal_filename=internal_upload.name,
            provider_filename=provider_upload.name,
            processing_time=processing_time,
        )
        return result, summary


async def reconcile_async(
    session: ReconciliationSession,
    *,
    delay: float = 0.0,
) -> tuple[ReconciliationResult, ReconciliationSummary]:
    """
    Run a session's reconciliation as an awaitable task.

    Args:
        session: Session with both sides loaded
        delay: Optional pause in seconds before the work starts, for
            interfaces that want to show a pending state

    Returns:
        Tuple of (result, summary), exactly as ``session.run()``
    """
    if delay > 0:
        await asyncio.sleep(delay)
    return session.run()

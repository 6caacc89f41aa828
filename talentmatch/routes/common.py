from fastapi import HTTPException
import logging

from talentmatch.schemas.matching import BatchResult

logger = logging.getLogger(__name__)

def require_identifier(value: str, name: str) -> str:
    if not value or not value.strip():
        raise HTTPException(status_code=400, detail=f"{name} is required")
    return value.strip()

def raise_for_fatal(batch: BatchResult) -> None:
    """A batch that hit a fatal error before anything succeeded is a protocol error.

    Any other outcome, including partial or total per-item failure, is reported
    with status 200 and the failures listed in the body.
    """
    if batch.fatal_error and batch.succeeded == 0:
        logger.error(f"Batch aborted before any item succeeded: {batch.fatal_error}")
        raise HTTPException(status_code=batch.fatal_status_code or 500, detail=batch.fatal_error)

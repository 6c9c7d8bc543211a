"""
Conversion of service errors to HTTP errors.
"""

import logging

from fastapi import HTTPException

from feedback_proxy.exceptions import RemoteCallFailure


logger = logging.getLogger(__name__)


def remote_failure(e: RemoteCallFailure, message: str) -> HTTPException:
    """Log a failed remote call and build the 500 response for it."""
    logger.error(f"{message}: {e.detail or e.message}")
    return HTTPException(
        status_code=500,
        detail={
            "error": message,
            "status": e.status_code,
            "message": e.message,
        }
    )

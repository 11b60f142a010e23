"""
Log result callback for formhook.

Writes the outcome of every dispatch to the structured log.
"""

from formhook.domain.models import DispatchResult
from formhook.domain.protocols import ResultCallback
from formhook.logging import get_logger
from formhook.plugins import result_callback

logger = get_logger(__name__)


@result_callback
class LogResultCallback(ResultCallback):
    """Log the outcome of sending form data."""

    def handle_result(self, result: DispatchResult) -> None:
        submission_id = result.context.submission_id if result.context else None

        if result.success:
            logger.info(
                "Form data sent",
                submission_id=submission_id,
                status=result.status_code,
                response_length=len(result.response_text or ""),
            )
        else:
            logger.warning(
                "Form data not sent",
                submission_id=submission_id,
                error=str(result.error),
            )

"""Default submission collaborator — validate the snapshot, keep the last one."""

from __future__ import annotations

import logging

from voiceform.domain.validation import validate_submission
from voiceform.services.collaborators import SubmissionReceipt

logger = logging.getLogger(__name__)


class ValidatingSubmitter:
    """Validate submissions against :class:`TaxFormSubmission`.

    Accepted snapshots are kept in :attr:`accepted` (newest last); nothing
    leaves the process.
    """

    def __init__(self) -> None:
        self.accepted: list[dict[str, str]] = []

    def submit(self, values: dict[str, str]) -> SubmissionReceipt:
        errors = validate_submission(values)
        if errors:
            logger.debug("Submission rejected: %s", sorted(errors))
            return SubmissionReceipt(accepted=False, values=dict(values), errors=errors)
        self.accepted.append(dict(values))
        logger.debug("Submission accepted (%d fields)", len(values))
        return SubmissionReceipt(accepted=True, values=dict(values))

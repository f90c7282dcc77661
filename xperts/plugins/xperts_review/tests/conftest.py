"""pytest common stuff and fixtures."""

from typing import List

import pytest

from xperts.xperts_profile.tests.conftest import *  # noqa

from ..events import SubmissionEvent, submission_event
from ..factories import ExtendedSubmissionFactory, SubmissionFactory
from ..logic__assignment import claim_submission
from ..models import Submission

SIMPLE_FORM_DATA = {
    "title": "Sorting algorithms in practice",
    "domain": "Backend",
    "language": "Python",
    "file_url": "https://files.example.org/sorting.zip",
}

EXTENDED_FORM_DATA = {
    "title": "Fix the off-by-one in the pager",
    "domain": "Frontend",
    "language": "TypeScript",
    "difficulty": "Medium",
    "description": "The last page of the list is never shown.",
    "github_repo": "https://github.com/xperts/pager",
    "commit_hash": "4f2a9c1",
    "issue_url": "https://github.com/xperts/pager/issues/12",
    "test_patch_url": "https://files.example.org/test.patch",
    "dockerfile_url": "https://files.example.org/Dockerfile",
    "solution_patch_url": "https://files.example.org/solution.patch",
}


def assign_to(submission: Submission, account) -> Submission:
    """Give the submission to the account, bypassing the selection algorithm."""
    claim_submission(submission, account, account.role)
    return submission


@pytest.fixture
def simple_submission(contributor) -> Submission:
    """A simple submission waiting for a reviewer."""
    return SubmissionFactory(contributor=contributor)


@pytest.fixture
def extended_submission(contributor) -> Submission:
    """An extended submission waiting for a tester."""
    return ExtendedSubmissionFactory(contributor=contributor)


@pytest.fixture
def claimed_submission(contributor, reviewer) -> Submission:
    submission = SubmissionFactory(contributor=contributor, state=Submission.States.CLAIMED)
    return assign_to(submission, reviewer)


@pytest.fixture
def events() -> List[SubmissionEvent]:
    """Collect the submission events sent during the test."""
    received = []

    def collect(sender, event, **kwargs):
        received.append(event)

    submission_event.connect(collect, weak=False, dispatch_uid="test_collect_events")
    yield received
    submission_event.disconnect(dispatch_uid="test_collect_events")

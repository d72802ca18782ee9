"""Pull request decoration: cleanup of previous runs, then one review or comment.

A decoration pass deletes the annotations and comments left by earlier runs
and then posts at most one new artifact. Fetch and delete errors propagate to
the caller; posting errors are logged by the posting functions themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from qgate.pr_decoration.comments import (
    delete_previous_comments,
    get_posted_comments,
    post_comment,
)
from qgate.pr_decoration.config import DecorationConfig, PullRequestTarget
from qgate.pr_decoration.logger import log_event
from qgate.pr_decoration.review import (
    delete_previous_review_comments,
    get_posted_review_comments,
    post_nothing_analyzed_review,
    post_review,
)
from qgate.pr_decoration.verdicts import REQUEST_CHANGES, Verdict, resolve_verdict, validate_verdict


@dataclass(frozen=True)
class DecorationRequest:
    has_quality_gate: bool
    gate_failed: bool
    body: str
    explicit_verdict: Optional[Verdict] = None
    annotations: tuple = ()

    def requested_verdict(self) -> Optional[Verdict]:
        if self.explicit_verdict is not None:
            return validate_verdict(self.explicit_verdict)
        if self.has_quality_gate:
            return REQUEST_CHANGES
        return None


def post_to_conversation(
    target: PullRequestTarget,
    config: DecorationConfig,
    gate_failed: bool,
    body: str,
    verdict: Optional[Verdict] = None,
    annotations=(),
) -> None:
    if not config.post_to_conversation:
        log_event("pull_request", "post_skipped", pr=target.pr_number, post_to_conversation=False)
        return

    if not config.pull_request_approval:
        # Annotations only travel inside a formal review.
        log_event("pull_request", "post_mode=comment", pr=target.pr_number, dropped_annotations=len(annotations))
        post_comment(target, body)
        return

    event = resolve_verdict(gate_failed, verdict)
    log_event(
        "pull_request",
        "post_mode=review",
        pr=target.pr_number,
        requested=verdict,
        gate_failed=gate_failed,
        event=event,
    )
    post_review(target, body, event, annotations=list(annotations))


def purge_previous_decorations(target: PullRequestTarget) -> None:
    # Both listings must complete before anything is deleted.
    review_comments = get_posted_review_comments(target)
    comments = get_posted_comments(target)

    if review_comments:
        delete_previous_review_comments(target, review_comments)
    if comments:
        delete_previous_comments(target, comments)


def decorate_pull_request(
    target: PullRequestTarget,
    config: DecorationConfig,
    request: DecorationRequest,
) -> None:
    if not config.post_to_conversation:
        log_event("pull_request", "decorate_skipped", pr=target.pr_number, post_to_conversation=False)
        return

    purge_previous_decorations(target)
    post_to_conversation(
        target,
        config,
        request.gate_failed,
        request.body,
        request.requested_verdict(),
        request.annotations,
    )


def decorate_nothing_analyzed(target: PullRequestTarget, config: DecorationConfig, message: str) -> None:
    if not config.post_to_conversation:
        log_event("pull_request", "nothing_analyzed_skipped", pr=target.pr_number, post_to_conversation=False)
        return

    purge_previous_decorations(target)
    post_nothing_analyzed_review(target, message, config)


def decorate(
    target: PullRequestTarget,
    config: DecorationConfig,
    has_quality_gate: bool,
    body: str,
    gate_failed: Optional[bool] = None,
    explicit_verdict: Optional[Verdict] = None,
) -> None:
    """Run one decoration pass.

    An unknown gate outcome counts as failed whenever a gate exists, so the
    default REQUEST_CHANGES posture is never flipped to APPROVE by omission.
    """
    if gate_failed is None:
        gate_failed = has_quality_gate
    decorate_pull_request(
        target,
        config,
        DecorationRequest(
            has_quality_gate=has_quality_gate,
            gate_failed=gate_failed,
            body=body,
            explicit_verdict=explicit_verdict,
        ),
    )

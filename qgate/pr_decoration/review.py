from qgate.pr_decoration.comments import is_decoration, with_marker
from qgate.pr_decoration.github_client import GitHubClientError, create, delete, list_paginated
from qgate.pr_decoration.logger import log_event
from qgate.pr_decoration.verdicts import APPROVE, COMMENT, validate_verdict


NOTHING_ANALYZED_HEADER = "<h1>Quality Gate</h1>\n\n### :heavy_check_mark: Passed \n\n"


def get_posted_review_comments(target):
    review_comments = list_paginated(target, f"pulls/{target.pr_number}/comments")
    posted = [comment for comment in review_comments if is_decoration(comment)]
    log_event(
        "review",
        f"fetched_annotations pr={target.pr_number} total={len(review_comments)} posted={len(posted)}",
    )
    return posted


def delete_previous_review_comments(target, review_comments):
    for comment in review_comments:
        comment_id = comment.get("id")
        try:
            delete(target, f"pulls/comments/{comment_id}")
        except GitHubClientError as exc:
            log_event("review", f"delete_annotation_failed pr={target.pr_number} id={comment_id} error={exc}")
            raise
    log_event("review", f"deleted_annotations pr={target.pr_number} count={len(review_comments)}")


def review_annotation(path, line, body, side="RIGHT"):
    """A line-level review comment attached to a review, marked for later cleanup."""
    return {"path": path, "line": int(line), "side": side, "body": with_marker(body)}


def post_review(target, body, event, annotations=None):
    event = validate_verdict(event)
    payload = {"event": event, "body": with_marker(body)}
    if annotations:
        payload["comments"] = [
            dict(annotation, body=with_marker(annotation.get("body") or ""))
            for annotation in annotations
        ]
    try:
        create(target, f"pulls/{target.pr_number}/reviews", payload)
    except GitHubClientError as exc:
        log_event("review", f"post_failed pr={target.pr_number} event={event} error={exc}")
        return
    log_event(
        "review",
        f"posted pr={target.pr_number} event={event} annotations={len(payload.get('comments', []))}",
    )


def post_nothing_analyzed_review(target, message, config):
    if not config.post_to_conversation:
        log_event("review", f"nothing_analyzed_skipped pr={target.pr_number} post_to_conversation=False")
        return
    event = APPROVE if config.pull_request_approval else COMMENT
    post_review(target, NOTHING_ANALYZED_HEADER + message, event)

from qgate.pr_decoration.github_client import GitHubClientError, create, delete, list_paginated
from qgate.pr_decoration.logger import log_event


DECORATION_MARKER = "<!-- qgate:pr-decoration -->"


def with_marker(body):
    if DECORATION_MARKER in body:
        return body
    return f"{DECORATION_MARKER}\n{body}"


def is_decoration(item):
    return DECORATION_MARKER in (item.get("body") or "")


def get_posted_comments(target):
    comments = list_paginated(target, f"issues/{target.pr_number}/comments")
    posted = [comment for comment in comments if is_decoration(comment)]
    log_event("comments", f"fetched pr={target.pr_number} total={len(comments)} posted={len(posted)}")
    return posted


def delete_previous_comments(target, comments):
    for comment in comments:
        comment_id = comment.get("id")
        try:
            delete(target, f"issues/comments/{comment_id}")
        except GitHubClientError as exc:
            log_event("comments", f"delete_failed pr={target.pr_number} id={comment_id} error={exc}")
            raise
    log_event("comments", f"deleted pr={target.pr_number} count={len(comments)}")


def post_comment(target, body):
    try:
        create(target, f"issues/{target.pr_number}/comments", {"body": with_marker(body)})
    except GitHubClientError as exc:
        log_event("comments", f"post_failed pr={target.pr_number} error={exc}")
        return
    log_event("comments", f"posted pr={target.pr_number}")

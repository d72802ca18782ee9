from qgate.pr_decoration.comments import (
    DECORATION_MARKER,
    delete_previous_comments,
    get_posted_comments,
    post_comment,
)
from qgate.pr_decoration.config import (
    ConfigLoadError,
    DecorationConfig,
    PullRequestTarget,
    load_config,
    load_target,
)
from qgate.pr_decoration.github_client import (
    GitHubClientError,
)
from qgate.pr_decoration.pull_request import (
    DecorationRequest,
    decorate,
    decorate_nothing_analyzed,
    decorate_pull_request,
    post_to_conversation,
    purge_previous_decorations,
)
from qgate.pr_decoration.review import (
    delete_previous_review_comments,
    get_posted_review_comments,
    post_nothing_analyzed_review,
    post_review,
    review_annotation,
)
from qgate.pr_decoration.verdicts import (
    APPROVE,
    COMMENT,
    REQUEST_CHANGES,
    VALID_VERDICTS,
    resolve_verdict,
)

__all__ = [
    "APPROVE",
    "COMMENT",
    "ConfigLoadError",
    "DECORATION_MARKER",
    "DecorationConfig",
    "DecorationRequest",
    "GitHubClientError",
    "PullRequestTarget",
    "REQUEST_CHANGES",
    "VALID_VERDICTS",
    "decorate",
    "decorate_nothing_analyzed",
    "decorate_pull_request",
    "delete_previous_comments",
    "delete_previous_review_comments",
    "get_posted_comments",
    "get_posted_review_comments",
    "load_config",
    "load_target",
    "post_comment",
    "post_nothing_analyzed_review",
    "post_review",
    "post_to_conversation",
    "purge_previous_decorations",
    "resolve_verdict",
    "review_annotation",
]

"""Review verdicts and the pure verdict resolution rule.

No I/O, no configuration access: the result depends only on the arguments.
"""

from __future__ import annotations

from typing import Literal, Optional

Verdict = Literal["APPROVE", "REQUEST_CHANGES", "COMMENT"]

APPROVE: Verdict = "APPROVE"
REQUEST_CHANGES: Verdict = "REQUEST_CHANGES"
COMMENT: Verdict = "COMMENT"

VALID_VERDICTS = frozenset({APPROVE, REQUEST_CHANGES, COMMENT})


def validate_verdict(verdict: str) -> Verdict:
    if verdict not in VALID_VERDICTS:
        raise ValueError(f"pr_decoration.verdict.invalid verdict={verdict!r}")
    return verdict  # type: ignore[return-value]


def resolve_verdict(gate_failed: bool, explicit_verdict: Optional[str] = None) -> Verdict:
    """Final verdict for a formal review.

    Without an explicit verdict the review is a neutral COMMENT. An explicit
    REQUEST_CHANGES is only kept when the gate actually failed; a gate that
    passed flips it to APPROVE.
    """

    if explicit_verdict is None:
        return COMMENT
    verdict = validate_verdict(explicit_verdict)
    if verdict == REQUEST_CHANGES and not gate_failed:
        return APPROVE
    return verdict

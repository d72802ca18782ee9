import argparse
import json
import sys
from pathlib import Path

from qgate.pr_decoration import (
    VALID_VERDICTS,
    ConfigLoadError,
    DecorationRequest,
    GitHubClientError,
    decorate_nothing_analyzed,
    decorate_pull_request,
    load_config,
    load_target,
    review_annotation,
)
from qgate.pr_decoration.logger import log_event

QUALITY_GATE_STATES = ("passed", "failed", "none")


def _read_body(body_file):
    if body_file == "-":
        return sys.stdin.read()
    try:
        return Path(body_file).read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Failed to read summary body: {exc}") from exc


def _read_annotations(annotations_file):
    """Load ``[{"path": ..., "line": ..., "body": ...}, ...]`` produced by the analysis step."""
    if not annotations_file:
        return ()
    try:
        entries = json.loads(Path(annotations_file).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigLoadError(f"Failed to read annotations: {exc}") from exc
    if not isinstance(entries, list):
        raise ConfigLoadError("Annotations file must hold a JSON list")
    try:
        return tuple(review_annotation(entry["path"], entry["line"], entry["body"]) for entry in entries)
    except (KeyError, TypeError, ValueError) as exc:
        raise ConfigLoadError(f"Malformed annotation entry: {exc!r}") from exc


def build_parser():
    ap = argparse.ArgumentParser(
        prog="qgate-decorate",
        description="Decorate a pull request with the result of a quality gate check.",
    )
    ap.add_argument("--body-file", help="Rendered summary text, '-' for stdin")
    ap.add_argument("--annotations-file", default=None, help="JSON list of line annotations for the review")
    ap.add_argument("--quality-gate", choices=QUALITY_GATE_STATES, default="none")
    ap.add_argument("--verdict", choices=sorted(VALID_VERDICTS), default=None)
    ap.add_argument("--config", default=None)
    ap.add_argument("--event-path", default=None)
    ap.add_argument("--nothing-analyzed", metavar="MESSAGE", default=None)
    return ap


def _fail(code, target, exc):
    log_event("action", "failed", pr=target.pr_number if target else None, error=exc)
    print(f"qgate-decorate: {exc}", file=sys.stderr)
    return code


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    target = None

    try:
        config = load_config(args.config)
        target = load_target(args.event_path)
        if args.nothing_analyzed is None:
            if not args.body_file:
                raise ConfigLoadError("--body-file is required unless --nothing-analyzed is given")
            body = _read_body(args.body_file)
            annotations = _read_annotations(args.annotations_file)
    except ConfigLoadError as exc:
        return _fail(2, target, exc)

    try:
        if args.nothing_analyzed is not None:
            log_event("action", "nothing_analyzed", pr=target.pr_number)
            decorate_nothing_analyzed(target, config, args.nothing_analyzed)
            return 0

        request = DecorationRequest(
            has_quality_gate=args.quality_gate != "none",
            gate_failed=args.quality_gate == "failed",
            body=body,
            explicit_verdict=args.verdict,
            annotations=annotations,
        )
        log_event(
            "action",
            "decorate",
            pr=target.pr_number,
            quality_gate=args.quality_gate,
            verdict=args.verdict,
            annotations=len(annotations),
        )
        decorate_pull_request(target, config, request)
    except GitHubClientError as exc:
        return _fail(1, target, exc)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

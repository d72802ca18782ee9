import http.client
import io
import urllib.error
import urllib.request

import pytest

from qgate.pr_decoration import github_client
from qgate.pr_decoration.comments import post_comment
from qgate.pr_decoration.config import PullRequestTarget
from qgate.pr_decoration.github_client import GitHubClientError, create, delete, list_paginated
from qgate.pr_decoration.logger import read_log_lines
from qgate.pr_decoration.review import post_review
from qgate.pr_decoration.verdicts import APPROVE


def _target():
    return PullRequestTarget(
        api_base="https://api.example.test/",
        owner="o",
        repo="r",
        pr_number=7,
        headers={"Authorization": "Bearer x"},
    )


def test_list_paginated_follows_full_pages(monkeypatch):
    urls = []
    pages = {1: [{"id": i} for i in range(github_client.PER_PAGE)], 2: [{"id": "last"}]}

    def _fake(method, url, payload=None, headers=None):
        urls.append((method, url, headers))
        page = int(url.rsplit("page=", 1)[1])
        return 200, pages[page], ""

    monkeypatch.setattr("qgate.pr_decoration.github_client._api_json_request", _fake)
    items = list_paginated(_target(), "issues/7/comments")
    assert len(items) == github_client.PER_PAGE + 1
    assert urls[0][1] == "https://api.example.test/repos/o/r/issues/7/comments?per_page=100&page=1"
    assert urls[0][2] == {"Authorization": "Bearer x"}
    assert len(urls) == 2


def test_list_paginated_rejects_error_status(monkeypatch):
    monkeypatch.setattr(
        "qgate.pr_decoration.github_client._api_json_request",
        lambda method, url, payload=None, headers=None: (403, {"message": "forbidden"}, "forbidden"),
    )
    with pytest.raises(GitHubClientError) as excinfo:
        list_paginated(_target(), "pulls/7/comments")
    assert "status=403" in str(excinfo.value)


def test_create_posts_payload(monkeypatch):
    captured = {}

    def _fake(method, url, payload=None, headers=None):
        captured.update(method=method, url=url, payload=payload)
        return 201, {"id": 99}, ""

    monkeypatch.setattr("qgate.pr_decoration.github_client._api_json_request", _fake)
    assert create(_target(), "pulls/7/reviews", {"event": "APPROVE", "body": "b"}) == {"id": 99}
    assert captured["method"] == "POST"
    assert captured["url"] == "https://api.example.test/repos/o/r/pulls/7/reviews"


def test_create_failure_raises(monkeypatch):
    monkeypatch.setattr(
        "qgate.pr_decoration.github_client._api_json_request",
        lambda method, url, payload=None, headers=None: (422, None, "unprocessable"),
    )
    with pytest.raises(GitHubClientError):
        create(_target(), "pulls/7/reviews", {})


def test_delete_treats_missing_as_done(monkeypatch):
    monkeypatch.setattr(
        "qgate.pr_decoration.github_client._api_json_request",
        lambda method, url, payload=None, headers=None: (404, None, ""),
    )
    delete(_target(), "issues/comments/1")


def test_delete_failure_raises(monkeypatch):
    monkeypatch.setattr(
        "qgate.pr_decoration.github_client._api_json_request",
        lambda method, url, payload=None, headers=None: (500, None, "oops"),
    )
    with pytest.raises(GitHubClientError):
        delete(_target(), "issues/comments/1")


def test_missing_api_base_rejected():
    target = PullRequestTarget(api_base="", owner="o", repo="r", pr_number=1)
    with pytest.raises(GitHubClientError):
        delete(target, "issues/comments/1")


class _FakeResponse:
    def __init__(self, status, raw=b"", read_error=None):
        self.status = status
        self._raw = raw
        self._read_error = read_error

    def read(self):
        if self._read_error is not None:
            raise self._read_error
        return self._raw

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


def _serve(monkeypatch, response=None, error=None):
    requests = []

    def _urlopen(req, timeout=None):
        requests.append(req)
        if error is not None:
            raise error
        return response

    monkeypatch.setattr(urllib.request, "urlopen", _urlopen)
    return requests


def test_request_parses_json_body(monkeypatch):
    requests = _serve(monkeypatch, _FakeResponse(201, b'{"id": 5}'))
    status, parsed, raw = github_client._api_json_request(
        "POST", "https://api.example.test/x", payload={"a": 1}, headers={"Authorization": "Bearer x"}
    )
    assert (status, parsed, raw) == (201, {"id": 5}, '{"id": 5}')
    assert requests[0].get_method() == "POST"
    assert requests[0].get_header("Content-type") == "application/json"


def test_request_empty_body_is_none(monkeypatch):
    _serve(monkeypatch, _FakeResponse(204, b""))
    assert github_client._api_json_request("DELETE", "https://api.example.test/x") == (204, None, "")


def test_http_error_returned_as_status(monkeypatch):
    error = urllib.error.HTTPError("https://api.example.test/x", 422, "Unprocessable", {}, io.BytesIO(b"<html>"))
    _serve(monkeypatch, error=error)
    status, parsed, raw = github_client._api_json_request("POST", "https://api.example.test/x", payload={})
    assert (status, parsed, raw) == (422, None, "<html>")


@pytest.mark.parametrize(
    "response,error",
    [
        (_FakeResponse(201, read_error=http.client.IncompleteRead(b"{")), None),
        (_FakeResponse(201, b"<html>not json</html>"), None),
        (_FakeResponse(201, b"\xff\xfe"), None),
        (None, urllib.error.URLError("connection refused")),
        (None, http.client.RemoteDisconnected("closed")),
    ],
)
def test_transport_and_body_failures_become_client_errors(monkeypatch, response, error):
    _serve(monkeypatch, response, error)
    with pytest.raises(GitHubClientError):
        github_client._api_json_request("POST", "https://api.example.test/x", payload={})


def test_post_review_logs_truncated_response(monkeypatch):
    _serve(monkeypatch, _FakeResponse(201, read_error=http.client.IncompleteRead(b"{")))
    post_review(_target(), "summary", APPROVE)
    assert any("[review] post_failed" in line for line in read_log_lines())


def test_post_comment_logs_non_json_response(monkeypatch):
    _serve(monkeypatch, _FakeResponse(201, b"<html>proxy page</html>"))
    post_comment(_target(), "summary")
    assert any("[comments] post_failed" in line for line in read_log_lines())


def test_listing_with_truncated_response_raises_client_error(monkeypatch):
    _serve(monkeypatch, _FakeResponse(200, read_error=http.client.IncompleteRead(b"[")))
    with pytest.raises(GitHubClientError):
        list_paginated(_target(), "issues/7/comments")

import http.client
import json
import urllib.error
import urllib.request

from qgate.pr_decoration.logger import log_event


class GitHubClientError(Exception):
    pass


PER_PAGE = 100
MAX_PAGES = 50


def _repo_url(target, path):
    base = (target.api_base or "").rstrip("/")
    if not base:
        raise GitHubClientError("Missing api_base")
    return f"{base}/repos/{target.owner}/{target.repo}/{path.lstrip('/')}"


def _parse_json(raw, method, url):
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise GitHubClientError(f"GitHub API returned non-JSON body method={method} url={url} error={exc}") from exc


def _api_json_request(method, url, payload=None, headers=None):
    req_headers = {"Accept": "application/vnd.github+json"}
    if headers:
        req_headers.update(headers)
    data = None
    if payload is not None:
        req_headers["Content-Type"] = "application/json"
        data = json.dumps(payload).encode("utf-8")

    req = urllib.request.Request(url, data=data, headers=req_headers, method=method)
    try:
        with urllib.request.urlopen(req, timeout=10) as response:
            status = response.status
            raw = response.read().decode("utf-8")
    except urllib.error.HTTPError as e:
        try:
            raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        except (http.client.HTTPException, OSError):
            raw = ""
        try:
            parsed = json.loads(raw) if raw else None
        except ValueError:
            parsed = None
        return e.code, parsed, raw
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as exc:
        raise GitHubClientError(f"GitHub API request failed method={method} url={url} error={exc!r}") from exc
    return status, _parse_json(raw, method, url), raw


def list_paginated(target, path):
    items = []
    separator = "&" if "?" in path else "?"
    for page in range(1, MAX_PAGES + 1):
        url = _repo_url(target, f"{path}{separator}per_page={PER_PAGE}&page={page}")
        status, data, raw = _api_json_request("GET", url, headers=target.headers)
        if status != 200 or not isinstance(data, list):
            raise GitHubClientError(
                f"GitHub API failure endpoint={path} page={page} status={status} body={raw}"
            )
        items.extend(data)
        if len(data) < PER_PAGE:
            break
    return items


def create(target, path, payload):
    url = _repo_url(target, path)
    status, data, raw = _api_json_request("POST", url, payload=payload, headers=target.headers)
    if status not in (200, 201):
        raise GitHubClientError(f"GitHub API failure endpoint={path} status={status} body={raw}")
    return data


def delete(target, path):
    url = _repo_url(target, path)
    status, _, raw = _api_json_request("DELETE", url, headers=target.headers)
    if status == 404:
        log_event("github_client", f"delete_missing endpoint={path} status=404")
        return
    if status not in (200, 204):
        raise GitHubClientError(f"GitHub API failure endpoint={path} status={status} body={raw}")

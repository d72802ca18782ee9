import json
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from qgate.pr_decoration.logger import log_event


class ConfigLoadError(Exception):
    pass


DEFAULT_CONFIG_PATH = ".github/pr-decoration.yaml"
DEFAULT_API_BASE = "https://api.github.com"

_KEY_ALIASES = {
    "postToConversation": "post_to_conversation",
    "post_to_conversation": "post_to_conversation",
    "pullRequestApproval": "pull_request_approval",
    "pull_request_approval": "pull_request_approval",
}

_ENV_OVERRIDES = {
    "INPUT_POSTTOCONVERSATION": "post_to_conversation",
    "INPUT_PULLREQUESTAPPROVAL": "pull_request_approval",
}


@dataclass(frozen=True)
class DecorationConfig:
    post_to_conversation: bool = True
    pull_request_approval: bool = False


@dataclass(frozen=True)
class PullRequestTarget:
    api_base: str
    owner: str
    repo: str
    pr_number: int
    headers: dict = field(default_factory=dict, compare=False)


def _config_path():
    return os.environ.get("PR_DECORATION_CONFIG_PATH") or None


def _parse_bool(name, value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise ConfigLoadError(f"Config value for {name} must be a boolean, got {value!r}")


def _read_config_file(path, required):
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        if not required:
            log_event("config", f"no_config_file path={path} using=defaults")
            return {}
        log_event("config", f"load_failed path={path} error={exc}")
        raise ConfigLoadError(f"Failed to read config: {exc}") from exc
    except OSError as exc:
        log_event("config", f"load_failed path={path} error={exc}")
        raise ConfigLoadError(f"Failed to read config: {exc}") from exc

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as exc:
        log_event("config", f"parse_failed path={path} error={exc}")
        raise ConfigLoadError(f"Failed to parse config YAML: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, dict):
        log_event("config", f"invalid_mapping path={path}")
        raise ConfigLoadError("Config YAML must be a mapping")
    return data


def load_config(config_path=None, environ=None):
    """Build the read-only decoration settings for one pass.

    Values come from an optional YAML file and are then overridden by the
    action inputs exposed as INPUT_* environment variables.
    """
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = _config_path()
    # Only the built-in default location may be absent.
    required = config_path is not None
    path = Path(config_path if config_path is not None else DEFAULT_CONFIG_PATH)
    data = _read_config_file(path, required)

    unknown = sorted(set(data) - set(_KEY_ALIASES))
    if unknown:
        log_event("config", f"unknown_keys path={path} keys={','.join(unknown)}")
        raise ConfigLoadError(f"Config has unknown keys: {', '.join(unknown)}")

    values = {}
    for key, value in data.items():
        name = _KEY_ALIASES[key]
        values[name] = _parse_bool(key, value)

    for env_name, name in _ENV_OVERRIDES.items():
        raw = env.get(env_name)
        if raw is None or raw.strip() == "":
            continue
        values[name] = _parse_bool(env_name, raw)

    config = DecorationConfig(**values)
    log_event(
        "config",
        (
            f"loaded path={path} post_to_conversation={config.post_to_conversation} "
            f"pull_request_approval={config.pull_request_approval}"
        ),
    )
    return config


def _pull_request_number(event_path):
    try:
        data = json.loads(Path(event_path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        log_event("config", f"event_load_failed path={event_path} error={exc}")
        raise ConfigLoadError(f"Failed to read event payload: {exc}") from exc

    pr = data.get("pull_request") if isinstance(data, dict) else None
    if not pr:
        raise ConfigLoadError(f"Event payload at {event_path} is not a pull request event")
    number = data.get("number") or pr.get("number")
    try:
        return int(number)
    except (TypeError, ValueError) as exc:
        raise ConfigLoadError(f"Event payload has no pull request number: {number!r}") from exc


def load_target(event_path=None, environ=None):
    env = os.environ if environ is None else environ

    repository = (env.get("GITHUB_REPOSITORY") or "").strip()
    if repository.count("/") != 1:
        raise ConfigLoadError(f"GITHUB_REPOSITORY must be owner/repo, got {repository!r}")
    owner, repo = repository.split("/")

    token = (env.get("GITHUB_TOKEN") or "").strip()
    if not token:
        raise ConfigLoadError("Missing GITHUB_TOKEN")

    effective_event_path = event_path or env.get("GITHUB_EVENT_PATH")
    if not effective_event_path:
        raise ConfigLoadError("Missing GITHUB_EVENT_PATH")
    pr_number = _pull_request_number(effective_event_path)

    api_base = (env.get("GITHUB_API_URL") or DEFAULT_API_BASE).rstrip("/")
    headers = {
        "Authorization": f"Bearer {token}",
        "Accept": "application/vnd.github+json",
        "X-GitHub-Api-Version": "2022-11-28",
    }
    log_event("config", f"target owner={owner} repo={repo} pr={pr_number} api_base={api_base}")
    return PullRequestTarget(api_base=api_base, owner=owner, repo=repo, pr_number=pr_number, headers=headers)

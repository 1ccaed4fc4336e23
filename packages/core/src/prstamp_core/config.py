import os
from pathlib import Path
from typing import Optional

import yaml

from prstamp_core.gh.reference import parse_repo_slug

DEFAULT_CONFIG: dict = {
    "default_repo": None,  # "owner/repo" used to resolve bare #123 references
    "slash_command": "/approve-pr",
    "port": 3000,  # only used when serving HTTP instead of Socket Mode
    "log_level": "INFO",
}

# Recognised environment variables, in the order they are reported at startup.
SETTING_DESCRIPTIONS: dict = {
    "SLACK_BOT_TOKEN": "Your Slack bot token (xoxb-...)",
    "SLACK_APP_TOKEN": "Your Slack app-level token (xapp-...), required for Socket Mode",
    "SLACK_SIGNING_SECRET": "Your Slack signing secret, required for HTTP mode",
    "GITHUB_TOKEN": "GitHub personal access token used to approve PRs (or use gh CLI)",
    "DEFAULT_REPO": "(optional) Default repository for #123 references, owner/repo format",
    "PORT": "(optional) Port for the HTTP event listener (default 3000)",
}

_SECRET_ENV = {
    "slack_bot_token": "SLACK_BOT_TOKEN",
    "slack_app_token": "SLACK_APP_TOKEN",
    "slack_signing_secret": "SLACK_SIGNING_SECRET",
    "github_token": "GITHUB_TOKEN",
}


def load_config(config_path: str = ".prstamp.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .prstamp.yml in the current directory
      3. CLI argument overrides
      4. DEFAULT_REPO / PORT environment variables

    Tokens are only ever read from the environment, never from the file.
    """
    config = dict(DEFAULT_CONFIG)

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if os.environ.get("DEFAULT_REPO"):
        config["default_repo"] = os.environ["DEFAULT_REPO"]
    if os.environ.get("PORT"):
        config["port"] = os.environ["PORT"]

    for key, env_var in _SECRET_ENV.items():
        config[key] = os.environ.get(env_var)

    return config


def missing_settings(config: dict, http_mode: bool = False) -> list[str]:
    """Return the names of required environment variables that are not set."""
    required = ["SLACK_BOT_TOKEN", "SLACK_SIGNING_SECRET" if http_mode else "SLACK_APP_TOKEN", "GITHUB_TOKEN"]
    env_to_key = {env: key for key, env in _SECRET_ENV.items()}
    return [name for name in required if not config.get(env_to_key[name])]


def validate_config(config: dict) -> list[str]:
    """Return human-readable problems with non-secret settings (empty when valid)."""
    problems = []

    default_repo = config.get("default_repo")
    if default_repo and parse_repo_slug(default_repo) is None:
        problems.append(f"default_repo must be in owner/repo format, got {default_repo!r}")

    try:
        port = int(config.get("port"))
        if not 0 < port < 65536:
            problems.append(f"port must be between 1 and 65535, got {port}")
    except (TypeError, ValueError):
        problems.append(f"port must be an integer, got {config.get('port')!r}")

    command = config.get("slash_command")
    if not isinstance(command, str) or not command.startswith("/") or " " in command:
        problems.append(f"slash_command must look like /name, got {command!r}")

    return problems

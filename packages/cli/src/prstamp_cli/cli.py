"""CLI entry point for prstamp.

Commands:
  serve  run the Slack bridge (Socket Mode by default, HTTP with --http)
  show   print a pull request snapshot without approving anything
"""

from __future__ import annotations

import importlib.metadata
import logging
import subprocess

import click
from rich.console import Console
from rich.logging import RichHandler

from prstamp_cli.commands.serve import serve_cmd
from prstamp_cli.commands.show import show_cmd

console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _gh_cli_token() -> str | None:
    """Token from the GitHub CLI session left by `gh auth login`, if any."""
    try:
        result = subprocess.run(["gh", "auth", "token"], capture_output=True, text=True, timeout=5)
    except (FileNotFoundError, subprocess.TimeoutExpired):
        logger.debug("gh CLI not available; no fallback GitHub token.")
        return None
    if result.returncode != 0:
        return None
    return result.stdout.strip() or None


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(
    version=importlib.metadata.version("prstamp"),
    prog_name="prstamp",
)
@click.option(
    "--config",
    "config_path",
    default=".prstamp.yml",
    show_default=True,
    help="Path to the configuration file.",
    envvar="PRSTAMP_CONFIG",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Logging verbosity. Overrides config file.",
)
@click.pass_context
def main(ctx: click.Context, config_path: str, log_level: str | None):
    """Approve GitHub pull requests from Slack."""
    from prstamp_core.config import load_config

    ctx.ensure_object(dict)

    config = load_config(config_path, cli_overrides={"log_level": log_level})
    _configure_logging(str(config["log_level"]))

    # GITHUB_TOKEN wins; otherwise approve as the user logged in to the gh CLI.
    if not config.get("github_token"):
        config["github_token"] = _gh_cli_token()
        if config["github_token"]:
            logger.debug("Using GitHub token from the gh CLI session.")

    ctx.obj["config"] = config


main.add_command(serve_cmd)
main.add_command(show_cmd)

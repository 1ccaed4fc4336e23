"""serve command: run the Slack bridge until interrupted."""

from __future__ import annotations

import asyncio

import click
from rich.console import Console

from prstamp_core.config import SETTING_DESCRIPTIONS, missing_settings, validate_config
from prstamp_core.slack.app import build_app, build_dispatcher, run_http, run_socket_mode

console = Console()


def _missing_settings_message(missing: list[str]) -> str:
    lines = [f"Missing required environment variables: {', '.join(missing)}", "", "Recognised environment variables:"]
    lines.extend(f"  {name}: {description}" for name, description in SETTING_DESCRIPTIONS.items())
    return "\n".join(lines)


@click.command("serve")
@click.option("--http", "http_mode", is_flag=True, help="Serve Slack events over HTTP instead of Socket Mode.")
@click.option("--port", type=int, default=None, help="Port for --http. Overrides config file and PORT.")
@click.pass_context
def serve_cmd(ctx, http_mode: bool, port: int | None):
    """Listen for mentions and the approval slash command.

    \b
    Required environment variables:
      SLACK_BOT_TOKEN       Slack bot token (xoxb-...)
      SLACK_APP_TOKEN       Slack app-level token (xapp-...), Socket Mode only
      SLACK_SIGNING_SECRET  Slack signing secret, --http only
      GITHUB_TOKEN          GitHub token (or use gh CLI)
    """
    config = ctx.obj["config"]
    if port is not None:
        config["port"] = port

    missing = missing_settings(config, http_mode=http_mode)
    if missing:
        raise click.UsageError(_missing_settings_message(missing))

    problems = validate_config(config)
    if problems:
        raise click.UsageError("Invalid configuration:\n" + "\n".join(f"  - {p}" for p in problems))

    dispatcher = build_dispatcher(config)
    app = build_app(config, dispatcher)

    console.print("[green]⚡️ Slack PR Approval Bot is running![/green]")
    console.print("📝 Mention the bot in a thread with a PR reference to approve it.")
    console.print(f"💡 Or use {dispatcher.command_name} directly.")

    if http_mode:
        run_http(app, int(config["port"]))
    else:
        try:
            asyncio.run(run_socket_mode(app, config["slack_app_token"]))
        except KeyboardInterrupt:
            console.print("[yellow]Shutting down.[/yellow]")

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from poe_puppet.config import PuppetConfig
from poe_puppet.errors import PuppetError
from poe_puppet.log import configure_logging
from poe_puppet.session import PoePuppet

CHAT_HELP = "Commands: /agents, /use NAME, /history [N], /clear, /quit"


def _open_session(config: PuppetConfig) -> PoePuppet:
    return PoePuppet(config)


@click.group(help="Talk to a web chatbot through a controlled browser.")
@click.option("--headed/--headless", default=None, help="Show the automated browser window.")
@click.option("--chatbot", help="Chatbot selected after login.")
@click.option("--profile-dir", type=click.Path(file_okay=False, path_type=Path), help="Browser profile directory.")
@click.option("--browser-path", help="Browser executable (defaults to Playwright's Chromium).")
@click.option("--log-level", help="Log verbosity (DEBUG, INFO, WARNING, ...).")
@click.pass_context
def cli(
    ctx: click.Context,
    headed: Optional[bool],
    chatbot: Optional[str],
    profile_dir: Optional[Path],
    browser_path: Optional[str],
    log_level: Optional[str],
) -> None:
    """Root command; resolves configuration and logging once."""
    config = PuppetConfig.from_env().with_overrides(
        headless=None if headed is None else not headed,
        chatbot=chatbot,
        user_data_dir=profile_dir,
        browser_path=browser_path,
        log_level=log_level.upper() if log_level else None,
    )
    configure_logging(config.log_level, config.log_file)
    ctx.obj = config


def _run(config: PuppetConfig, action):
    try:
        with _open_session(config) as puppet:
            return action(puppet)
    except PuppetError as exc:
        raise click.ClickException(str(exc)) from exc


@cli.command()
@click.pass_obj
def agents(config: PuppetConfig) -> None:
    """List the chatbots offered on the page."""

    def action(puppet: PoePuppet) -> None:
        for agent in puppet.list_agents():
            marker = "*" if agent.name == puppet.active_agent else " "
            click.echo(f"{marker} {agent.name}")

    _run(config, action)


@cli.command()
@click.argument("message")
@click.pass_obj
def ask(config: PuppetConfig, message: str) -> None:
    """Send one MESSAGE and print the reply."""
    click.echo(_run(config, lambda puppet: puppet.send(message)))


@cli.command()
@click.option("-n", "count", default=5, show_default=True, help="Number of messages to show.")
@click.pass_obj
def history(config: PuppetConfig, count: int) -> None:
    """Print the most recent messages of the default chatbot.

    Opens a fresh session, so this shows what the freshly loaded page renders
    for the configured chatbot. Use /history inside `chat` for a conversation
    in progress.
    """
    for line in _run(config, lambda puppet: puppet.read_last(count)):
        click.echo(line)


@cli.command()
@click.pass_obj
def clear(config: PuppetConfig) -> None:
    """Reset the context of the default chatbot.

    Opens a fresh session and clears the configured chatbot's conversation.
    Use /clear inside `chat` to reset a conversation in progress.
    """
    _run(config, lambda puppet: puppet.clear_context())
    click.echo("Context cleared.")


@cli.command()
@click.pass_obj
def chat(config: PuppetConfig) -> None:
    """Interactive conversation loop."""
    _run(config, _chat_loop)


def _chat_loop(puppet: PoePuppet) -> None:
    click.echo(f"🤖 Talking to {puppet.active_agent}. {CHAT_HELP}")
    while True:
        try:
            line = click.prompt("You", prompt_suffix="> ", default="", show_default=False)
        except click.Abort:
            break
        line = line.strip()
        if not line:
            continue
        if line.startswith("/"):
            if not _handle_command(puppet, line):
                break
            continue
        try:
            reply = puppet.send(line)
        except PuppetError as exc:
            click.echo(f"❌ {exc}", err=True)
            continue
        click.echo(f"{puppet.active_agent}> {reply}")


def _handle_command(puppet: PoePuppet, line: str) -> bool:
    """Run a slash command. Returns False when the loop should stop."""
    command, _, argument = line[1:].partition(" ")
    argument = argument.strip()
    try:
        if command in {"quit", "exit"}:
            return False
        if command == "agents":
            for agent in puppet.list_agents():
                click.echo(f"  • {agent.name}")
        elif command == "use":
            if not argument:
                click.echo("Usage: /use NAME", err=True)
            else:
                puppet.select_agent(argument)
                click.echo(f"🤖 Switched to {puppet.active_agent}")
        elif command == "history":
            count = int(argument) if argument.isdigit() else 5
            for entry in puppet.read_last(count):
                click.echo(f"  {entry}")
        elif command == "clear":
            puppet.clear_context()
            click.echo("🧹 Context cleared.")
        else:
            click.echo(f"Unknown command '/{command}'. {CHAT_HELP}", err=True)
    except PuppetError as exc:
        click.echo(f"❌ {exc}", err=True)
    return True


def main() -> None:
    cli()


if __name__ == "__main__":
    main()

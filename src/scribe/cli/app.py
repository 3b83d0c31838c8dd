"""Main CLI application.

Click commands for scribe: chat, tools.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import TYPE_CHECKING

import click

from scribe import __version__
from scribe.config.loader import load_config
from scribe.core.errors import ConfigError

if TYPE_CHECKING:
    from collections.abc import Callable

    from scribe.cli.display import AgentDisplay
    from scribe.config.schema import LoggingConfig, ScribeConfig
    from scribe.providers.anthropic import AnthropicProvider
    from scribe.tools.registry import ToolRegistry


# ── Helpers ──────────────────────────────────────────────────────


def _error(msg: str) -> None:
    """Print an error message to stderr and exit."""
    click.echo(f"Error: {msg}", err=True)
    sys.exit(1)


def _load_config(config_path: str | None) -> ScribeConfig:
    """Load config with user-friendly error handling."""
    try:
        return load_config(path=config_path)
    except ConfigError as e:
        _error(str(e))
        raise  # unreachable, keeps mypy happy


def _configure_logging(config: LoggingConfig, *, verbose: bool = False) -> None:
    """Set up stdlib logging from config."""
    level = logging.DEBUG if verbose else logging.getLevelName(config.level.upper())
    if not isinstance(level, int):
        _error(f"Unknown logging level: {config.level}")
    handlers: list[logging.Handler] = []
    if config.file:
        handlers.append(logging.FileHandler(config.file, encoding="utf-8"))
    else:
        handlers.append(logging.StreamHandler(sys.stderr))
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=handlers,
        force=True,
    )
    # Keep SDK request logs out of the chat transcript
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _setup_tools(config: ScribeConfig) -> ToolRegistry:
    """Build the startup tool registry from config."""
    from scribe.tools import default_tools

    return default_tools(root=config.tools.root, ignore_dirs=config.tools.ignore_dirs)


def _setup_transport(config: ScribeConfig) -> AnthropicProvider:
    """Create the Anthropic transport, or exit if no API key is available."""
    from scribe.providers.anthropic import AnthropicProvider

    prov = config.provider
    if not prov.api_key:
        env_name = prov.api_key_env or "ANTHROPIC_API_KEY"
        _error(f"No API key configured. Set {env_name} or provider.api_key.")

    return AnthropicProvider(
        api_key=prov.api_key,
        model_id=config.general.model,
        max_tokens=config.general.max_tokens,
        system=config.general.system_prompt,
        base_url=prov.base_url,
        timeout=prov.timeout,
    )


def _line_reader(display: AgentDisplay) -> Callable[[], str | None]:
    """Return a user-input source reading prompted lines from the terminal."""

    def _read() -> str | None:
        try:
            return display.prompt()
        except EOFError:
            return None

    return _read


# ── CLI group ────────────────────────────────────────────────────


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="scribe")
@click.option(
    "--config",
    "config_path",
    default=None,
    type=click.Path(),
    help="Path to config file.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: str | None) -> None:
    """scribe - chat with Claude about the files in this directory.

    Claude can read, list and edit files through local tools.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ── chat ─────────────────────────────────────────────────────────


@cli.command()
@click.option("--model", default=None, help="Model id (overrides config).")
@click.option(
    "--max-tokens",
    type=click.IntRange(min=1),
    default=None,
    help="Max output tokens per response (overrides config).",
)
@click.option(
    "--max-tool-rounds",
    type=click.IntRange(min=1),
    default=None,
    help="Tool rounds in a row before asking the user again (default: no limit).",
)
@click.option("-v", "--verbose", is_flag=True, default=False, help="Debug logging.")
@click.pass_context
def chat(
    ctx: click.Context,
    model: str | None,
    max_tokens: int | None,
    max_tool_rounds: int | None,
    verbose: bool,
) -> None:
    """Start an interactive chat session.

    Reads one line per turn until end of input (ctrl-d) or ctrl-c.
    """
    config = _load_config(ctx.obj["config_path"])
    if model is not None:
        config.general.model = model
    if max_tokens is not None:
        config.general.max_tokens = max_tokens
    if max_tool_rounds is not None:
        config.general.max_tool_rounds = max_tool_rounds

    _configure_logging(config.logging, verbose=verbose)
    transport = _setup_transport(config)

    try:
        error = asyncio.run(_chat_async(config, transport))
    except KeyboardInterrupt:
        click.echo("\nExiting...")
        return

    if error is not None:
        _error(error)


async def _chat_async(
    config: ScribeConfig, transport: AnthropicProvider
) -> str | None:
    """Async implementation for the chat command."""
    from scribe.agent import Agent
    from scribe.cli.display import AgentDisplay

    display = AgentDisplay()
    agent = Agent(
        transport,
        _setup_tools(config),
        _line_reader(display),
        display=display,
        max_tool_rounds=config.general.max_tool_rounds,
    )
    return await agent.run()


# ── tools ────────────────────────────────────────────────────────


@cli.command()
@click.pass_context
def tools(ctx: click.Context) -> None:
    """List the tools offered to the model."""
    config = _load_config(ctx.obj["config_path"])
    registry = _setup_tools(config)

    for tool in registry:
        desc = tool.descriptor
        click.echo(f"{desc.name}:")
        click.echo(f"  {desc.description.splitlines()[0]}")
        for param in desc.parameters:
            required = "required" if param.required else "optional"
            click.echo(
                f"  - {param.name} ({param.type}, {required}): {param.description}"
            )
        click.echo()

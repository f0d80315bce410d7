"""CLI entry point for gatekeeper."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich import print as rprint
from rich.logging import RichHandler
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table

from gatekeeper.checker import PermissionChecker
from gatekeeper.config import GatekeeperConfig, load_config
from gatekeeper.config.loader import DEFAULT_CONFIG_TEMPLATE
from gatekeeper.errors import GatekeeperError
from gatekeeper.policy import load_policy
from gatekeeper.rules.handlers import Inline, NamedReference

app = typer.Typer(
    name="gatekeeper",
    help="Role-based permission checks driven by rules and policy files.",
)

config_app = typer.Typer(help="Manage gatekeeper configuration.")
app.add_typer(config_app, name="config")

# Global state
_config: GatekeeperConfig | None = None

_LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
}


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        data = {
            "time": self.formatTime(record),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(config: GatekeeperConfig) -> None:
    """Install a single handler on the ``gatekeeper`` logger."""
    if config.log_format == "json":
        handler: logging.Handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
    else:
        handler = RichHandler(show_path=False)
    root = logging.getLogger("gatekeeper")
    root.handlers[:] = [handler]
    root.setLevel(_LOG_LEVELS[config.log_level])


def _get_config() -> GatekeeperConfig:
    if _config is None:
        return load_config()
    return _config


@app.callback()
def main(
    config: Annotated[
        str | None, typer.Option("--config", "-c", help="Path to gatekeeper.yaml")
    ] = None,
) -> None:
    """Global options."""
    global _config
    try:
        _config = load_config(config)
    except ValueError as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)
    configure_logging(_config)


def _build_checker(role: str | None, policy: str | None) -> PermissionChecker:
    cfg = _get_config()
    checker = PermissionChecker.from_config(cfg)
    try:
        if policy:
            load_policy(policy, checker)
    except Exception:
        checker.close()
        raise
    if role is not None:
        checker.set_current_role(role)
    return checker


@app.command()
def check(
    permission: str = typer.Argument(..., help="Permission to check, e.g. video.create"),
    args: list[str] | None = typer.Argument(None, help="Extra arguments passed to the handler"),
    role: str | None = typer.Option(None, "--role", "-r", help="Role to check as"),
    policy: str | None = typer.Option(None, "--policy", "-p", help="Policy file to load"),
) -> None:
    """Check a permission. Exits 0 if allowed, 1 if denied, 2 on error."""
    try:
        with _build_checker(role, policy) as checker:
            allowed = checker.can(permission, *(args or []))
            who = checker.current_role or "(no role)"
    except (GatekeeperError, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    if allowed:
        rprint(f"[green]ALLOW[/green] {escape(permission)} for {escape(who)}")
        return
    rprint(f"[red]DENY[/red] {escape(permission)} for {escape(who)}")
    raise typer.Exit(1)


@app.command()
def rules(
    policy: str | None = typer.Option(None, "--policy", "-p", help="Policy file to load"),
) -> None:
    """List the rules defined by config and policy."""
    try:
        checker = _build_checker(None, policy)
    except (GatekeeperError, ValueError) as e:
        rprint(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    table = Table(title=f"Rules ({len(checker.registry)})")
    table.add_column("Name", style="cyan")
    table.add_column("Kind", style="green")
    table.add_column("Target", style="yellow")
    with checker:
        for name in checker.registry.names():
            handler = checker.registry.lookup(name)
            if isinstance(handler, NamedReference):
                table.add_row(name, "reference", handler.target)
            elif isinstance(handler, Inline):
                table.add_row(name, "inline", getattr(handler.func, "__qualname__", "-"))
    rprint(table)


@config_app.command("show")
def config_show() -> None:
    """Show current resolved configuration."""
    import yaml

    cfg = _get_config()
    rprint(Syntax(yaml.dump(cfg.model_dump(), default_flow_style=False), "yaml"))


@config_app.command("init")
def config_init(
    force: bool = typer.Option(False, "--force", help="Overwrite existing config"),
) -> None:
    """Create default gatekeeper.yaml in current directory."""
    target = Path("gatekeeper.yaml")
    if target.exists() and not force:
        rprint("[yellow]gatekeeper.yaml already exists.[/yellow] Use --force to overwrite.")
        raise typer.Exit(1)
    target.write_text(DEFAULT_CONFIG_TEMPLATE)
    rprint(f"[green]Created[/green] {target}")


if __name__ == "__main__":
    app()

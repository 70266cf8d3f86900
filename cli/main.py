"""
devrestart - Main CLI Application

Shows what the lifecycle router would decide at the Starting phase for the
current environment, and how loaded modules are partitioned.
"""
import importlib
import os
import sys
from typing import List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config import get_config
from core.types import CodeRegion, PartitioningStrategy
from observability import shutdown_observability
from restart.agent import AgentReloaderProbe
from restart.policy import ENABLED_VARIABLE, RestartEnablementPolicy
from restart.strategy import classify_module

app = typer.Typer(
    name="devrestart",
    help="devrestart - lifecycle-driven restart enablement",
    add_completion=False
)

console = Console()


@app.command()
def status():
    """Show the restart decision for the current environment."""
    config = get_config()

    probe = AgentReloaderProbe(config.restart.agent_reloader_modules)
    policy = RestartEnablementPolicy(probe)
    decision = policy.evaluate()

    console.print(Panel.fit(
        "[bold blue]devrestart - Restart Decision[/bold blue]",
        border_style="blue"
    ))

    table = Table(title="Starting Phase")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    raw = os.environ.get(ENABLED_VARIABLE)
    table.add_row(ENABLED_VARIABLE, raw if raw is not None else "[dim]unset[/dim]")
    table.add_row("Override", decision.source.value)
    table.add_row(
        "Restart",
        "[green]enabled[/green]" if decision.enabled else "[red]disabled[/red]",
    )
    table.add_row("Strategy", decision.strategy.value if decision.strategy else "-")
    table.add_row("Restart on initialize", str(decision.restart_on_initialize))
    reloaders = probe.active_reloaders()
    table.add_row("Agent reloaders", ", ".join(reloaders) if reloaders else "none")
    table.add_row("Listener order", str(config.restart.listener_order))

    console.print(table)


@app.command()
def classify(
    modules: Optional[List[str]] = typer.Argument(None, help="Modules to import and classify"),
    force: bool = typer.Option(False, "--force", "-f", help="Use the force-all-development strategy"),
    development_only: bool = typer.Option(False, "--development", "-d", help="Only list restart-eligible modules"),
):
    """Classify modules as restart-eligible or watch-only."""
    config = get_config()
    strategy = PartitioningStrategy.FORCE_ALL_DEVELOPMENT if force else PartitioningStrategy.DEFAULT

    if modules:
        targets = {}
        for name in modules:
            try:
                targets[name] = importlib.import_module(name)
            except ImportError as e:
                console.print(f"[red]Cannot import {name}: {e}[/red]")
                raise typer.Exit(code=1)
    else:
        targets = {name: module for name, module in list(sys.modules.items()) if module is not None}

    table = Table(title=f"Code Regions ({strategy.value})")
    table.add_column("Module", style="cyan", no_wrap=True)
    table.add_column("Region", no_wrap=True)
    table.add_column("File", style="dim", overflow="fold")

    for name in sorted(targets):
        module = targets[name]
        region = classify_module(module, strategy, config.restart.library_markers)
        if development_only and region is not CodeRegion.DEVELOPMENT:
            continue
        style = "green" if region is CodeRegion.DEVELOPMENT else "yellow"
        table.add_row(name, f"[{style}]{region.value}[/{style}]", getattr(module, "__file__", None) or "")

    console.print(table)


def main():
    """Main entry point."""
    try:
        app()
    finally:
        shutdown_observability()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Web3 Research Swarm CLI

Research a batch of projects from the terminal and print the report.

Usage:
    # Offline run with canned responses
    python run_research.py --offline --projects Solana Uniswap Aave

    # Live run against the configured provider, 4 agents, custom criteria
    python run_research.py --projects Solana Aave --criteria tokenomics security --agents 4

    # Save the full report as JSON
    python run_research.py --offline --projects Solana --save research_results
"""

import sys
import json
import asyncio
import argparse
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich import box

from config import APIConfig, SwarmConfig, validate_api_key
from research_client import create_client
from swarm import ResearchSwarm, SwarmReport

DEFAULT_CRITERIA = ["tokenomics", "team", "security", "community"]

console = Console()


def render_report(report: SwarmReport):
    """Print a swarm report as a table plus a totals panel"""
    table = Table(title=f"Research results ({report.swarm_id})", box=box.ROUNDED)
    table.add_column("#", style="cyan", width=4)
    table.add_column("Project", style="magenta")
    table.add_column("Agent", style="yellow", width=10)
    table.add_column("Status", width=6)
    table.add_column("Summary / Error", style="white")

    for i, entry in enumerate(report.results, 1):
        if entry.result.success:
            data = entry.result.data or {}
            detail = str(data.get("summary") or data.get("analysis") or "")[:120]
            status = "[green]OK[/green]"
        else:
            detail = f"[red]{entry.result.error}[/red]"
            status = "[red]FAIL[/red]"
        table.add_row(str(i), entry.project, entry.agent, status, detail)

    console.print(table)
    console.print(Panel(
        f"Projects: {report.total_projects} | "
        f"Succeeded: {report.successful} | Failed: {report.failed}",
        title="Batch Complete",
        border_style="green" if report.failed == 0 else "yellow",
    ))


def save_report(report: SwarmReport, output_dir: str = "research_results") -> Path:
    """Save the report as timestamped JSON"""
    out_path = Path(output_dir)
    out_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    json_file = out_path / f"research_{timestamp}.json"
    with open(json_file, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)

    console.print(f"\nResults saved to: {json_file}")
    return json_file


async def run(
    projects,
    criteria,
    agents: Optional[int] = None,
    offline: bool = False,
    parallel: bool = False,
    save: Optional[str] = None,
) -> SwarmReport:
    api_config = APIConfig.from_env(provider="offline" if offline else None)
    swarm_config = SwarmConfig.from_env(api_config)
    if agents:
        swarm_config.max_agents = agents
    swarm_config.parallel = parallel or swarm_config.parallel

    if not validate_api_key(api_config.provider):
        console.print(f"[yellow]No API key configured for provider '{api_config.provider}'[/yellow]")

    console.print(f"[cyan]>> Initializing swarm with {swarm_config.max_agents} agents ({api_config.provider})...[/cyan]")

    async with create_client(api_config) as client:
        swarm = ResearchSwarm(client, swarm_config)
        await swarm.initialize()

        console.print(f"[cyan]>> Researching {len(projects)} projects...[/cyan]\n")
        report = await swarm.coordinate_research(projects, criteria)

    render_report(report)
    if save:
        save_report(report, save)
    return report


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Research Web3 projects with a swarm of research agents",
        epilog=__doc__,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--projects", nargs="+", required=True, help="Project names to research")
    parser.add_argument("--criteria", nargs="*", default=DEFAULT_CRITERIA, help="Research criteria")
    parser.add_argument("--agents", type=int, help="Number of research agents")
    parser.add_argument("--offline", action="store_true", help="Use canned responses, no network")
    parser.add_argument("--parallel", action="store_true", help="Run assignments concurrently")
    parser.add_argument("--save", metavar="DIR", help="Save the report as JSON into DIR")
    parser.add_argument("--verbose", "-v", action="store_true", help="Show agent logs")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    try:
        report = asyncio.run(run(
            args.projects,
            args.criteria,
            agents=args.agents,
            offline=args.offline,
            parallel=args.parallel,
            save=args.save,
        ))
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/yellow]")
        return 130
    except Exception as e:
        console.print(f"[red]Research failed: {e}[/red]")
        return 1

    return 0 if report.failed == 0 else 2


if __name__ == "__main__":
    sys.exit(main())

"""Main CLI entry point for leaddispatch command."""

import csv
import json
import logging
import random
import click
from datetime import datetime
from pathlib import Path
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from typing import Optional, List, Dict, Any, Tuple

from .. import __version__
from ..core.config import DispatchConfigManager
from ..core.errors import DistributionError
from ..core.weeks import date_key
from ..distribution.scheduler import LeadScheduler
from ..distribution.simulation import simulate_week, DEFAULT_DAILY_LEADS
from ..distribution.queue_builder import slot_counts
from ..reporting.weekly_report import summarize_week, DistributionStatus
from ..storage.state_store import SchedulerStateStore

console = Console()

STATUS_STYLES = {
    DistributionStatus.UNDER: "red",
    DistributionStatus.OVER: "yellow",
    DistributionStatus.ON_TARGET: "green",
}


def get_store(state_path: Optional[str] = None) -> Tuple[SchedulerStateStore, LeadScheduler]:
    """Get state store and the scheduler it holds."""
    config = DispatchConfigManager().config
    path = Path(state_path) if state_path else config.state_path
    store = SchedulerStateStore(path, history_limit=config.assignment_history_limit)
    return store, store.load(seed=config.seed)


def fail(error: DistributionError):
    """Print a scheduler error and exit non-zero."""
    console.print(f"[red]✗ {error}[/red]")
    raise SystemExit(1)


def parse_roster_option(values: Tuple[str, ...]) -> List[Dict[str, Any]]:
    """Parse ID:NAME:CREDITS triples."""
    entries = []
    for value in values:
        head, sep, credits = value.rpartition(":")
        user_id, _, user_name = head.partition(":")
        if not sep or not user_id:
            raise click.BadParameter(f"expected ID:NAME:CREDITS, got {value!r}")
        try:
            entries.append({"user_id": user_id, "user_name": user_name or user_id, "credits": int(credits)})
        except ValueError:
            raise click.BadParameter(f"credits must be a whole number in {value!r}")
    return entries


def load_roster_file(path: Path) -> List[Dict[str, Any]]:
    """Read a roster from JSON (list of objects) or CSV (user_id,user_name,credits)."""
    if path.suffix.lower() == ".json":
        with open(path, 'r') as f:
            data = json.load(f)
        return list(data.get("participants", []) if isinstance(data, dict) else data)

    entries = []
    with open(path, 'r', newline='') as f:
        for row in csv.DictReader(f):
            try:
                credits = int(row.get("credits", ""))
            except ValueError:
                raise click.BadParameter(f"bad credits for {row.get('user_id')}: {row.get('credits')!r}")
            entries.append({
                "user_id": row.get("user_id", ""),
                "user_name": row.get("user_name") or row.get("user_id", ""),
                "credits": credits,
            })
    return entries


def render_queue(scheduler: LeadScheduler, limit: int):
    """Print today's queue preview and slot distribution."""
    queue = scheduler.get_today_queue()
    if not queue:
        console.print("[yellow]No queue built yet. Run 'leaddispatch queue'.[/yellow]")
        return

    preview = " → ".join(item.user_name for item in queue[:limit])
    more = "..." if len(queue) > limit else ""
    console.print(f"[bold]Queue for {queue[0].date}[/bold] ({len(queue)} slots)")
    console.print(f"  {preview}{more}")

    names = {item.user_id: item.user_name for item in queue}
    table = Table(title="Slot Distribution")
    table.add_column("Representative", style="cyan")
    table.add_column("Credits", justify="right")
    table.add_column("Slots", justify="right", style="bold")

    credits = {item.user_id: item.credits for item in queue}
    for user_id, count in sorted(slot_counts(queue).items(), key=lambda x: -x[1]):
        table.add_row(names[user_id], str(credits[user_id]), str(count))

    console.print(table)


def render_deficits(deficits, title: str):
    """Print a deficit table."""
    table = Table(title=title)
    table.add_column("Representative", style="cyan")
    table.add_column("Target", justify="right")
    table.add_column("Actual", justify="right")
    table.add_column("Deficit", justify="right")
    table.add_column("Cumulative", justify="right", style="bold")

    for d in deficits:
        style = "red" if d.is_under_served else "yellow" if d.deficit < 0 else "green"
        table.add_row(
            d.user_name,
            f"{d.target_leads:.1f}",
            str(d.actual_leads),
            f"[{style}]{d.deficit:+.1f}[/{style}]",
            f"{d.cumulative_deficit:+.1f}",
        )

    console.print(table)


@click.group()
@click.version_option(version=__version__, prog_name="leaddispatch")
@click.option("--verbose", "-v", is_flag=True, help="Debug logging")
def cli(verbose: bool):
    """Lead Dispatch - fair, credit-weighted lead distribution.

    \b
    Daily cycle:
      leaddispatch init -r 1:Alice:5 -r 2:Ben:2     # Start the week
      leaddispatch queue                            # Build today's queue
      leaddispatch assign lead-001 lead-002         # Dispatch leads
      leaddispatch close-day                        # Carry deficits forward
      leaddispatch report                           # Weekly summary
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ============================================================================
# WEEKLY CYCLE
# ============================================================================

@cli.command()
@click.option("--rep", "-r", "reps", multiple=True, help="Participant as ID:NAME:CREDITS")
@click.option("--file", "-f", "roster_file", type=click.Path(exists=True), help="Roster JSON or CSV")
@click.option("--week-of", type=click.DateTime(formats=["%Y-%m-%d"]), help="Any date in the week")
@click.option("--state", "state_path", help="Custom state file path")
def init(reps: Tuple[str, ...], roster_file: Optional[str], week_of: Optional[datetime], state_path: Optional[str]):
    """Start a new week with the given roster."""
    entries = parse_roster_option(reps)
    if roster_file:
        entries.extend(load_roster_file(Path(roster_file)))

    store, scheduler = get_store(state_path)
    try:
        participations = scheduler.initialize_weekly_participation(entries, week_of=week_of)
    except DistributionError as e:
        fail(e)

    store.save(scheduler)

    table = Table(title=f"Week {participations[0].week_start} → {participations[0].week_end}")
    table.add_column("ID", style="dim")
    table.add_column("Representative", style="cyan")
    table.add_column("Credits", justify="right")
    table.add_column("Share", justify="right", style="bold")

    for p in participations:
        table.add_row(p.user_id, p.user_name, str(p.credits), f"{p.target_share * 100:.1f}%")

    console.print(table)
    console.print(f"[green]✓ {len(participations)} participants, {participations[0].total_credits} credits[/green]")


@cli.command()
@click.option("--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), help="Queue date (default today)")
@click.option("--preview", "-n", default=None, type=int, help="Queue entries to preview")
@click.option("--state", "state_path", help="Custom state file path")
def queue(day: Optional[datetime], preview: Optional[int], state_path: Optional[str]):
    """Build the daily assignment queue."""
    config = DispatchConfigManager().config
    store, scheduler = get_store(state_path)
    queue_day = day.date() if day else scheduler.clock().date()
    if config.seed is not None:
        # Same seed and date give the same order; each day still differs
        scheduler.rng = random.Random(f"{config.seed}:{date_key(queue_day)}")

    try:
        scheduler.build_daily_queue(queue_day)
    except DistributionError as e:
        fail(e)

    store.save(scheduler)
    render_queue(scheduler, preview if preview is not None else config.queue_preview_length)


@cli.command()
@click.argument("lead_ids", nargs=-1, required=True)
@click.option("--state", "state_path", help="Custom state file path")
def assign(lead_ids: Tuple[str, ...], state_path: Optional[str]):
    """Assign one or more leads from today's queue."""
    store, scheduler = get_store(state_path)

    results = []
    try:
        for lead_id in lead_ids:
            results.append((lead_id, scheduler.assign_lead(lead_id)))
    except DistributionError as e:
        # Keep whatever was assigned before the failure
        if results:
            store.save(scheduler)
        fail(e)

    store.save(scheduler)

    for lead_id, result in results:
        console.print(f"[green]✓[/green] {lead_id} → [cyan]{result.user_name}[/cyan]")


@cli.command("close-day")
@click.option("--date", "day", type=click.DateTime(formats=["%Y-%m-%d"]), help="Day to close (default today)")
@click.option("--state", "state_path", help="Custom state file path")
def close_day(day: Optional[datetime], state_path: Optional[str]):
    """Compute the day's deficits for tomorrow's queue."""
    store, scheduler = get_store(state_path)
    try:
        deficits = scheduler.calculate_daily_deficit(day.date() if day else None)
    except DistributionError as e:
        fail(e)

    store.save(scheduler)
    render_deficits(deficits, f"Deficits for {deficits[0].date}")


@cli.command()
@click.option("--output", "-o", type=click.Path(), help="Save report to file")
@click.option("--state", "state_path", help="Custom state file path")
def report(output: Optional[str], state_path: Optional[str]):
    """Print the weekly distribution report."""
    _, scheduler = get_store(state_path)
    try:
        text = scheduler.generate_weekly_report()
    except DistributionError as e:
        fail(e)

    if output:
        Path(output).write_text(text + "\n")
        console.print(f"[green]✓ Report saved to {output}[/green]")
    else:
        console.print(text, highlight=False)


@cli.command()
@click.option("--state", "state_path", help="Custom state file path")
def status(state_path: Optional[str]):
    """Show participants, today's queue and weekly counts."""
    _, scheduler = get_store(state_path)
    participations = scheduler.get_active_participants()
    if not participations:
        console.print("[yellow]No active week. Run 'leaddispatch init'.[/yellow]")
        return

    counts = scheduler.assignment_counts()
    table = Table(title=f"Week {participations[0].week_start} → {participations[0].week_end}")
    table.add_column("Representative", style="cyan")
    table.add_column("Credits", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Received", justify="right", style="bold")
    table.add_column("Status", justify="center")

    for s in summarize_week(participations, counts):
        style = STATUS_STYLES[s.status]
        table.add_row(
            s.user_name,
            str(s.credits),
            f"{s.target_leads:.1f}",
            str(s.actual_leads),
            f"[{style}]{s.status.value}[/{style}]",
        )

    console.print(table)
    render_queue(scheduler, DispatchConfigManager().config.queue_preview_length)


@cli.command()
@click.option("--leads", "-l", default=",".join(str(n) for n in DEFAULT_DAILY_LEADS),
              help="Comma-separated daily lead counts (up to 7)")
@click.option("--seed", type=int, help="Random seed for reproducible queues")
@click.option("--file", "-f", "roster_file", type=click.Path(exists=True), help="Roster JSON or CSV")
def simulate(leads: str, seed: Optional[int], roster_file: Optional[str]):
    """Simulate a week of distribution in memory."""
    try:
        daily = [int(n) for n in leads.split(",") if n.strip()]
    except ValueError:
        raise click.BadParameter(f"not a list of whole numbers: {leads!r}", param_hint="--leads")

    participants = load_roster_file(Path(roster_file)) if roster_file else None
    scheduler = LeadScheduler(seed=seed)

    try:
        result = simulate_week(scheduler, participants, daily)
    except DistributionError as e:
        fail(e)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--leads")

    names = {p.user_id: p.user_name for p in scheduler.get_active_participants()}
    for index, day in enumerate(result.days, 1):
        slots = ", ".join(f"{names[u]}: {n}" for u, n in day.queue_slots.items())
        received = ", ".join(f"{names[u]}: {n}" for u, n in day.leads_assigned.items())
        console.print(Panel.fit(
            f"[bold]Queue:[/bold] {' → '.join(day.queue_preview)}\n"
            f"[bold]Slots:[/bold] {slots}\n"
            f"[bold]Leads ({day.total_leads}):[/bold] {received}",
            title=f"📅 Day {index} - {day.day.strftime('%A %Y-%m-%d')}"
        ))
        render_deficits(day.deficits, f"Deficits after day {index}")

    console.print(result.report, highlight=False)


# ============================================================================
# CONFIGURATION
# ============================================================================

@cli.group()
def config():
    """View or change dispatch settings."""
    pass


@config.command("show")
def config_show():
    """Show current settings."""
    manager = DispatchConfigManager()
    lines = "\n".join(f"  {key}: {value}" for key, value in manager.to_dict().items())
    console.print(Panel.fit(lines, title=f"⚙️  {manager.config_path}"))


@config.command("set")
@click.option("--seed", type=int, help="Random seed (use --clear-seed for entropy)")
@click.option("--clear-seed", is_flag=True, help="Go back to unseeded shuffling")
@click.option("--state-path", help="Default state file")
@click.option("--history-limit", type=int, help="Assignments kept in the state file")
@click.option("--preview", type=int, help="Queue entries to preview")
def config_set(seed: Optional[int], clear_seed: bool, state_path: Optional[str],
               history_limit: Optional[int], preview: Optional[int]):
    """Update settings."""
    changes: Dict[str, Any] = {}
    if seed is not None:
        changes["seed"] = seed
    if clear_seed:
        changes["seed"] = None
    if state_path:
        changes["state_path"] = state_path
    if history_limit is not None:
        changes["assignment_history_limit"] = history_limit
    if preview is not None:
        changes["queue_preview_length"] = preview

    if not changes:
        console.print("[yellow]Nothing to change.[/yellow]")
        return

    DispatchConfigManager().update(**changes)
    console.print("[green]✓ Settings saved[/green]")


if __name__ == "__main__":
    cli()

"""Main CLI interface for the cricket scorer."""

import logging
import random
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..checks import MatchIntegrityChecker
from ..config import settings
from ..database import create_tables, drop_tables
from ..models import Match, Player, TossCall, TossDecision
from ..models.base import format_overs_limit
from ..schemas import BallCreate, InningsSummary, MatchSummary
from ..snapshots import SnapshotRepository
from ..store import RootStore
from ..toss import run_toss

# Initialize rich console
console = Console()


def setup_logging(level: str = "INFO", log_file: Optional[str] = None, verbose: bool = False):
    """Send scorer logs to the rich console and optionally to a file.

    Only ``cricket_scorer.*`` loggers follow ``level``. Library loggers stay
    at WARNING unless ``verbose`` is set.
    """
    scorer_level = getattr(logging, level.upper(), logging.INFO)

    handlers: List[logging.Handler] = [
        RichHandler(console=console, show_time=False, show_path=False, markup=False)
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s [%(name)s] %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=handlers,
        force=True,
    )
    logging.getLogger("cricket_scorer").setLevel(scorer_level)


app = typer.Typer(
    name="cricket-scorer",
    help="Cricket Scorer - ball-by-ball scoring for amateur matches",
    no_args_is_help=True
)

# Global state
app_state = {"dry_run": False, "verbose": False}


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Log file path"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Do not save changes")
):
    """Cricket Scorer - ball-by-ball scoring for amateur matches."""
    log_level = "DEBUG" if verbose else settings.logging.level
    setup_logging(log_level, log_file or settings.logging.file, verbose)

    app_state['dry_run'] = dry_run
    app_state['verbose'] = verbose


# ----------------------------------------------------------------------
# Store helpers
# ----------------------------------------------------------------------

def _open_store() -> RootStore:
    """Load the saved store and arrange for changes to be saved."""
    repository = SnapshotRepository()
    repository.ensure_schema()
    store = repository.load_or_create()
    if not app_state["dry_run"] and settings.match.autosave:
        repository.attach(store)
    app_state["repository"] = repository
    return store


def _finish(store: RootStore) -> None:
    """Save explicitly when autosave is off."""
    if app_state["dry_run"]:
        console.print("[yellow]Dry-run: changes not saved[/yellow]")
        return
    if not settings.match.autosave:
        app_state["repository"].save(store)


def _find_player(store: RootStore, key: str) -> Player:
    """Resolve a player by id, id prefix or case-insensitive name."""
    if key in store.players:
        return store.players[key]
    matches = [p for p in store.players.values() if p.id.startswith(key) or p.name.lower() == key.lower()]
    if len(matches) != 1:
        raise typer.BadParameter(f"No single player matches '{key}'")
    return matches[0]


def _find_match(store: RootStore, key: str) -> Match:
    """Resolve a match by id or id prefix."""
    if key in store.matches:
        return store.matches[key]
    matches = [m for m in store.matches.values() if m.id.startswith(key)]
    if len(matches) != 1:
        raise typer.BadParameter(f"No single match matches '{key}'")
    return matches[0]


def _innings_table(summary: InningsSummary) -> Table:
    title = f"Innings {summary.number}: {summary.team_name} {summary.score_line} ({summary.overs_played:.1f} ov)"
    if summary.target is not None:
        title += f" - target {summary.target}"
    table = Table(title=title)
    table.add_column("Batter", style="cyan")
    table.add_column("R", justify="right", style="green")
    table.add_column("B", justify="right")
    table.add_column("4s", justify="right")
    table.add_column("6s", justify="right")
    table.add_column("SR", justify="right", style="magenta")
    for line in summary.batters:
        name = line.name if line.out else f"{line.name} *"
        table.add_row(name, str(line.runs), str(line.balls), str(line.fours), str(line.sixes), f"{line.strike_rate:.0f}")
    table.caption = f"RR {summary.run_rate:.2f} | {format_overs_limit(summary.overs_to_play)} overs | {summary.status.value}"
    if summary.yet_to_bat:
        table.caption += f" | Yet to bat: {', '.join(summary.yet_to_bat)}"
    return table


# ----------------------------------------------------------------------
# Commands
# ----------------------------------------------------------------------

@app.command("setup-db")
def setup_db(force: bool = typer.Option(False, "--force", help="Force recreation of tables")):
    """Initialize the snapshot database schema."""
    console.print("[bold]Setting up database schema...[/bold]")

    try:
        if force:
            console.print("Dropping existing tables...")
            drop_tables()

        create_tables()
        console.print("[green]✅ Database schema initialized successfully![/green]")

    except Exception as e:
        console.print(f"[red]❌ Database setup failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("add-player")
def add_player(name: str = typer.Argument(..., help="Player display name")):
    """Register a player."""
    try:
        store = _open_store()
        player = store.add_player(name)
        _finish(store)
        console.print(f"[green]✅ Added {player.name}[/green] ({player.id})")
    except Exception as e:
        console.print(f"[red]❌ Add player failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("seed-players")
def seed_players():
    """Register a demo squad of eight players."""
    try:
        store = _open_store()
        added = store.add_demo_players()
        _finish(store)
        if not added:
            console.print("[yellow]Demo players already registered[/yellow]")
            return
        console.print(f"[green]✅ Added {len(added)} players:[/green] {', '.join(p.name for p in added)}")
    except Exception as e:
        console.print(f"[red]❌ Seeding players failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("rename-player")
def rename_player(
    player: str = typer.Argument(..., help="Player id, id prefix or name"),
    name: str = typer.Argument(..., help="New display name"),
):
    """Rename a player."""
    try:
        store = _open_store()
        target = _find_player(store, player)
        store.update_player(target.id, name)
        _finish(store)
        console.print(f"[green]✅ Renamed to {target.name}[/green]")
    except Exception as e:
        console.print(f"[red]❌ Rename failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("remove-player")
def remove_player(
    player: str = typer.Argument(..., help="Player id, id prefix or name"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Remove a player from the registry."""
    try:
        store = _open_store()
        target = _find_player(store, player)
        if not yes and not typer.confirm(f"Remove {target.name}?"):
            raise typer.Abort()
        store.remove_player(target.id)
        _finish(store)
        console.print(f"[green]✅ Removed {target.name}[/green]")
    except typer.Abort:
        raise
    except Exception as e:
        console.print(f"[red]❌ Remove failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("players")
def list_players():
    """List registered players."""
    store = _open_store()
    table = Table(title=f"Players ({store.players_count})")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    for player in store.players.values():
        table.add_row(player.id[:8], player.name)
    console.print(table)


@app.command("new-match")
def new_match(
    innings: int = typer.Option(1, "--innings", "-i", help="Innings per team (1 or 2)"),
    overs: str = typer.Option("unlimited", "--overs", "-o", help="Overs per innings, or 'unlimited'"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for the team split"),
):
    """Create a match from a random split of all players."""
    try:
        store = _open_store()
        if seed is not None:
            store.configure(rng=random.Random(seed))
        match = store.add_match(innings, overs)
        if match is None:
            console.print(f"[red]❌ Need at least {store.rules.min_players} players[/red]")
            raise typer.Exit(1)
        _finish(store)
        console.print(f"[green]✅ Created match {match.id[:8]}[/green]")
        for team in match.teams:
            console.print(f"  [bold]{team.name}[/bold]: {', '.join(p.name for p in team.players)}")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Match creation failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("matches")
def list_matches():
    """List matches."""
    store = _open_store()
    table = Table(title="Matches")
    table.add_column("ID", style="cyan")
    table.add_column("Teams", style="green")
    table.add_column("Format")
    table.add_column("Status", style="magenta")
    table.add_column("Result", style="yellow")
    for match in store.matches.values():
        summary = MatchSummary.from_match(match)
        table.add_row(
            match.id[:8],
            " v ".join(team.name for team in summary.teams),
            f"{format_overs_limit(match.overs_per_innings)} ov x {match.innings_per_team}",
            summary.status.value,
            summary.result or "",
        )
    console.print(table)


@app.command("show")
def show_match(match: str = typer.Argument(..., help="Match id or id prefix")):
    """Show the scorecard of a match."""
    try:
        store = _open_store()
        summary = MatchSummary.from_match(_find_match(store, match))
    except Exception as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)

    for team in summary.teams:
        console.print(f"[bold]{team.name}[/bold]: {', '.join(team.players)}")
    if summary.toss_winner:
        console.print(f"Toss: {summary.toss_winner} chose to {summary.toss_decision}")
    for innings in summary.innings:
        console.print(_innings_table(innings))
    if summary.result:
        console.print(f"[bold green]🏆 {summary.result}[/bold green]")


@app.command("toss")
def toss(
    match: str = typer.Argument(..., help="Match id or id prefix"),
    call: TossCall = typer.Option(TossCall.HEADS, "--call", help="Calling team's call"),
    decision: TossDecision = typer.Option(TossDecision.BAT, "--decision", help="Toss winner's choice"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for the coin"),
):
    """Run the coin toss and start the first innings."""
    try:
        store = _open_store()
        target = _find_match(store, match)
        rng = random.Random(seed) if seed is not None else None
        outcome = run_toss(target, call, decision, rng)
        if outcome is None:
            console.print("[yellow]Toss already completed[/yellow]")
            raise typer.Exit(1)
        _finish(store)
        caller = target.team_by_id(outcome.calling_team_id)
        console.print(f"{caller.name} called {outcome.call.value}, coin shows {outcome.result.value}")
        console.print(f"[green]✅ {target.toss_winner.name} won the toss and chose to {decision.value}[/green]")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Toss failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("ball")
def ball(
    match: str = typer.Argument(..., help="Match id or id prefix"),
    runs: int = typer.Argument(0, help="Runs off the ball (0, 1, 2, 3, 4, 6)"),
    wicket: bool = typer.Option(False, "--wicket", "-w", help="Batter dismissed"),
    player: Optional[str] = typer.Option(None, "--player", "-p", help="Batter on strike"),
):
    """Record a delivery in the current innings."""
    try:
        store = _open_store()
        target = _find_match(store, match)
        innings = target.current_innings
        if innings is None:
            console.print("[red]❌ Toss has not been completed[/red]")
            raise typer.Exit(1)
        payload = BallCreate(
            runs=runs,
            wicket=wicket,
            player_id=_find_player(store, player).id if player else None,
        )
        if not innings.add_ball(payload.runs, payload.wicket, payload.player_id):
            console.print("[red]❌ Ball rejected[/red]")
            raise typer.Exit(1)
        _finish(store)
        console.print(f"{innings.team.name} {innings.total_runs}/{innings.total_wickets} ({innings.overs_played:.1f} ov)")
        if target.current_innings is not innings and target.current_innings is not None:
            console.print(f"[bold]Innings over. {target.current_innings.team.name} to bat.[/bold]")
        if target.result_summary:
            console.print(f"[bold green]🏆 {target.result_summary}[/bold green]")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Ball failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("undo")
def undo(match: str = typer.Argument(..., help="Match id or id prefix")):
    """Undo the last delivery, reopening a just-finished innings if needed."""
    try:
        store = _open_store()
        innings = _find_match(store, match).undoable_innings
        if innings is None:
            console.print("[yellow]Nothing to undo[/yellow]")
            raise typer.Exit(1)
        removed = innings.undo_last_ball()
        _finish(store)
        console.print(f"[green]✅ Undid {removed.runs} run(s){' and wicket' if removed.wicket else ''}[/green]")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Undo failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("declare")
def declare(match: str = typer.Argument(..., help="Match id or id prefix")):
    """Declare the current innings closed."""
    try:
        store = _open_store()
        innings = _find_match(store, match).current_innings
        if innings is None or not innings.declare():
            console.print("[yellow]No innings in play to declare[/yellow]")
            raise typer.Exit(1)
        _finish(store)
        console.print(f"[green]✅ Declared at {innings.total_runs}/{innings.total_wickets}[/green]")
    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"[red]❌ Declare failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("delete-match")
def delete_match(
    match: str = typer.Argument(..., help="Match id or id prefix"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a match. This cannot be undone."""
    try:
        store = _open_store()
        target = _find_match(store, match)
        if not yes and not typer.confirm(f"Delete match {target.id[:8]}?"):
            raise typer.Abort()
        store.delete_match(target.id)
        _finish(store)
        console.print(f"[green]✅ Deleted match {target.id[:8]}[/green]")
    except typer.Abort:
        raise
    except Exception as e:
        console.print(f"[red]❌ Delete failed: {e}[/red]")
        raise typer.Exit(1)


@app.command("check")
def check():
    """Run integrity checks over every stored match."""
    store = _open_store()
    report = MatchIntegrityChecker().check_store(store)
    rows: List[tuple] = [
        (match_id[:8], issue["type"], issue["detail"])
        for match_id, issues in report["checks"].items()
        for issue in issues
    ]
    if not rows:
        console.print(f"[green]✅ {report['matches_checked']} match(es) passed all checks[/green]")
        return
    table = Table(title=f"Integrity issues (score {report['overall_score']})")
    table.add_column("Match", style="cyan")
    table.add_column("Check", style="magenta")
    table.add_column("Detail", style="red")
    for row in rows:
        table.add_row(*row)
    console.print(table)
    raise typer.Exit(1)


if __name__ == "__main__":
    app()

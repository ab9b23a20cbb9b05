"""CLI commands for generating lineup portfolios."""

import logging
import re
from pathlib import Path

import typer
from rich.console import Console
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table

from slate_optimizer.config.settings import configure_logging, settings
from slate_optimizer.optimization.exceptions import WorkerError
from slate_optimizer.optimization.export import (
    export_lineups_csv,
    exposure_table,
    lineups_to_dataframe,
)
from slate_optimizer.optimization.models import Lineup, OptimizerConfig, PlayerProjection
from slate_optimizer.optimization.player_pool import (
    PlayerOverride,
    load_candidates_csv,
    prepare_pool,
)
from slate_optimizer.optimization.worker import (
    ErrorMessage,
    OptimizerRequest,
    OptimizerWorker,
    ProgressMessage,
    ResultMessage,
    iter_messages,
)

app = typer.Typer(help="Lineup generation commands")
console = Console()
logger = logging.getLogger(__name__)

MATCHUP_SEPARATORS = re.compile(r"\s+vs\.?\s+|[@/,\s-]+", re.IGNORECASE)


@app.command("run")
def run_optimizer(
    players_csv: Path = typer.Argument(..., exists=True, dir_okay=False, help="Salary/projection CSV"),
    num_lineups: int = typer.Option(settings.default_num_lineups, "--num-lineups", "-n", min=1),
    salary_cap: int = typer.Option(settings.dk_classic_salary_cap, "--salary-cap", min=1),
    max_exposure: float = typer.Option(
        settings.default_max_exposure, "--max-exposure", min=0, max=100, help="Default max exposure (%)"
    ),
    lock: list[str] = typer.Option([], "--lock", "-l", help="Player id to lock (repeatable)"),
    exclude: list[str] = typer.Option([], "--exclude", "-x", help="Player id to exclude (repeatable)"),
    team: list[str] = typer.Option([], "--team", "-t", help="Team to boost, e.g. BOS (repeatable)"),
    matchup: list[str] = typer.Option(
        [], "--matchup", "-m", help="Matchup to boost, e.g. BOS@LAL (repeatable)"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="DraftKings upload CSV to write"),
    show_exposures: bool = typer.Option(False, "--exposures", help="Print the exposure table"),
    in_process: bool = typer.Option(False, "--in-process", help="Run without a background worker"),
    log_level: str = typer.Option(settings.log_level, "--log-level"),
) -> None:
    """Generate unique lineups from a salary/projection CSV.

    Examples:
        slate-optimizer optimize run players.csv -n 20 -o lineups.csv

        slate-optimizer optimize run players.csv -n 150 --max-exposure 35 --lock 1234567 --exposures

        slate-optimizer optimize run players.csv --team BOS --matchup DEN@MIA
    """
    configure_logging(log_level)

    try:
        players = load_candidates_csv(players_csv)
        config = OptimizerConfig(num_lineups=num_lineups, salary_cap=salary_cap, max_exposure=max_exposure)
    except ValueError as e:
        console.print(f"❌ {e}", style="red")
        raise typer.Exit(1) from e

    overrides = {player_id: PlayerOverride(exclude=True) for player_id in exclude}
    pool = prepare_pool(
        players,
        overrides=overrides,
        locked_ids=lock,
        selected_teams=team,
        selected_matchups=[parse_matchup(value) for value in matchup],
    )
    console.print(
        f"🎯 Building {num_lineups} lineups from {len(pool)} players (cap ${salary_cap:,})..."
    )

    request = OptimizerRequest(players=pool, config=config)
    lineups = _collect_lineups(request, in_process)

    if not lineups:
        console.print("😞 No valid lineups could be generated with the current pool.", style="yellow")
        raise typer.Exit(1)
    if len(lineups) < num_lineups:
        console.print(
            f"⚠️  Only {len(lineups)} of {num_lineups} lineups could be generated.", style="yellow"
        )

    _display_lineups(lineups, pool)
    if show_exposures:
        _display_exposures(lineups, pool)
    if output is not None:
        export_lineups_csv(lineups, output)
        console.print(f"💾 Wrote {len(lineups)} lineups to {output}", style="green")


def parse_matchup(value: str) -> list[str]:
    """Split "BOS@LAL", "BOS-LAL" or "BOS vs LAL" into team abbreviations."""
    return [team for team in MATCHUP_SEPARATORS.split(value.strip()) if team]


def _collect_lineups(request: OptimizerRequest, in_process: bool) -> list[Lineup]:
    target = request.config.num_lineups
    with Progress(
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TextColumn("{task.completed}/{task.total}"),
        console=console,
    ) as progress:
        task = progress.add_task("Optimizing", total=target)
        try:
            if in_process:
                return _consume(iter_messages(request), progress, task)
            with OptimizerWorker(request) as worker:
                return _consume(worker.messages(), progress, task)
        except WorkerError as e:
            console.print(f"❌ {e}", style="red")
            raise typer.Exit(1) from e


def _consume(messages, progress: Progress, task) -> list[Lineup]:
    for message in messages:
        if isinstance(message, ProgressMessage):
            progress.update(task, completed=message.lineups_found)
        elif isinstance(message, ResultMessage):
            return message.lineups
        elif isinstance(message, ErrorMessage):
            console.print(f"❌ {message.message}", style="red")
            raise typer.Exit(1)
    return []


def _display_lineups(lineups: list[Lineup], pool: list[PlayerProjection]) -> None:
    df = lineups_to_dataframe(lineups, pool)
    table = Table(title=f"🏀 {len(lineups)} Lineups")
    for column in df.columns:
        table.add_column(str(column), justify="right" if column in ("salary", "projection") else "left")
    for row in df.itertuples(index=False):
        table.add_row(*(f"{value:,.2f}" if isinstance(value, float) else str(value) for value in row))
    console.print(table)


def _display_exposures(lineups: list[Lineup], pool: list[PlayerProjection]) -> None:
    df = exposure_table(lineups, pool)
    table = Table(title="📊 Exposures")
    table.add_column("Player")
    table.add_column("ID")
    table.add_column("Lineups", justify="right")
    table.add_column("Exposure", justify="right")
    for row in df.to_dict("records"):
        table.add_row(row["name"], row["player_id"], str(row["count"]), f"{row['exposure']:.1f}%")
    console.print(table)


if __name__ == "__main__":
    app()

"""CLI interface for the slate optimizer."""

import typer

from .optimize import app as optimize_app

main = typer.Typer(help="Slate Optimizer CLI")

# Add sub-applications
main.add_typer(optimize_app, name="optimize", help="Lineup generation commands")

"""
Main CLI application using Typer.

Entry point: python -m portfolio.cli
CLI Name: portfolio-admin
"""
import typer

from portfolio import __version__ as app_version
from portfolio.cli.commands import auth, gallery

app = typer.Typer(
    name="portfolio-admin",
    help="Portfolio Admin CLI - credential and gallery maintenance tools",
)

@app.command()
def version():
    """Show CLI version information."""
    typer.echo(f"Portfolio Admin CLI version {app_version}")

# Register command groups


app.add_typer(auth.app, name="auth")
app.add_typer(gallery.app, name="gallery")

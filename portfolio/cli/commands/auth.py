"""
Admin credential helpers.
"""
from typing import Annotated

import typer

from portfolio.cli.commands.utils import console
from portfolio.core.security import hash_password_for_storage, is_authorized

app = typer.Typer(help="Admin credential commands")


@app.command("hash-password")
def hash_password(
    password: Annotated[
        str,
        typer.Option(prompt=True, hide_input=True, confirmation_prompt=True),
    ],
):
    """Print the value to store in ADMIN_PASSWORD_HASH."""
    console.print(hash_password_for_storage(password))


@app.command("verify-proof")
def verify_proof(
    proof: Annotated[str, typer.Argument(help="SHA-256 hex digest sent by clients")],
):
    """Check a client proof against the configured ADMIN_PASSWORD_HASH."""
    if is_authorized(proof):
        console.print("[green]Proof accepted[/green]")
        return
    console.print("[red]Proof rejected[/red]")
    raise typer.Exit(code=1)

import typer
from rich.console import Console

console = Console()


def confirm_action(message: str, assume_yes: bool = False) -> bool:
    """Ask for confirmation unless ``assume_yes`` is set."""
    if assume_yes:
        return True
    return typer.confirm(message, default=False)

"""
Gallery inspection and maintenance commands.
"""
import uuid
from typing import Annotated, List, Optional

import typer
from rich.table import Table
from sqlmodel import Session, select

from portfolio.cli.commands.utils import confirm_action, console
from portfolio.cli.logging import setup_cli_logging
from portfolio.core.database import engine
from portfolio.core.exceptions import GalleryError
from portfolio.core.security import is_authorized
from portfolio.models.portfolio_model import PortfolioModel
from portfolio.services.collection_store import CollectionStore
from portfolio.services.featured_projector import FEATURED_POSITION
from portfolio.services.gallery_service import GalleryService
from portfolio.services.portfolio_model_service import PortfolioModelService
from portfolio.services.position_allocator import plan_reassignment, simulate, target_from_order

app = typer.Typer(help="Gallery commands")


@app.command("show")
def show(
    slug: Annotated[str, typer.Argument(help="Model slug")],
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """List a model's images in position order."""
    logger = setup_cli_logging("gallery", verbose)
    with Session(engine) as session:
        try:
            model = PortfolioModelService(session).get_model_by_slug(slug)
            view = GalleryService(session).read(model.id)
        except GalleryError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc

        table = Table(title=f"{model.name or model.slug} gallery")
        table.add_column("Position", justify="right")
        table.add_column("Image ID")
        table.add_column("Payload")
        table.add_column("Featured")
        images = ([view.featured] if view.featured else []) + view.gallery
        logger.debug("Loaded %d image(s) for %s", len(images), slug)
        for image in images:
            table.add_row(
                str(image.position),
                str(image.id),
                image.payload_ref,
                "*" if view.featured is not None and image.id == view.featured.id else "",
            )
        console.print(table)


@app.command("reorder")
def reorder(
    slug: Annotated[str, typer.Argument(help="Model slug")],
    image_ids: Annotated[List[uuid.UUID], typer.Argument(help="Image ids in the new order")],
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Print the plan without writing")] = False,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
    proof: Annotated[
        Optional[str],
        typer.Option(
            "--proof",
            envvar="PORTFOLIO_ADMIN_PROOF",
            help="Admin proof (SHA-256 hex of the admin password); required unless --dry-run",
        ),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Apply a new image order; the first id becomes the featured image."""
    logger = setup_cli_logging("gallery", verbose)
    with Session(engine) as session:
        try:
            model = PortfolioModelService(session).get_model_by_slug(slug)
            current = CollectionStore(session).current_positions(model.id)
            plan = plan_reassignment(current, target_from_order(image_ids))
        except GalleryError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc

        if not plan:
            console.print("Gallery already in the requested order")
            return

        table = Table(title="Reassignment plan")
        table.add_column("Phase", justify="right")
        table.add_column("Image ID")
        table.add_column("Position", justify="right")
        for step in plan.steps:
            table.add_row(str(step.phase), str(step.item_id), str(step.position))
        console.print(table)

        if dry_run:
            try:
                for _state in simulate(current, plan):
                    pass
            except GalleryError as exc:
                console.print(f"[red]Plan is unsafe: {exc}[/red]")
                raise typer.Exit(code=1) from exc
            console.print("[green]Plan verified; no changes written[/green]")
            return

        authorized = is_authorized(proof)
        if not authorized:
            console.print("[red]A valid --proof is required to write changes[/red]")
            raise typer.Exit(code=1)

        if not confirm_action(f"Apply {len(plan)} position change(s) to '{slug}'?", yes):
            raise typer.Exit(code=1)

        try:
            GalleryService(session, authorized=authorized).reorder(model.id, image_ids)
        except GalleryError as exc:
            console.print(f"[red]{exc}[/red]")
            raise typer.Exit(code=1) from exc
        logger.info("Reordered %s: %d image(s) moved", slug, len(plan))
        console.print("[green]Gallery reordered[/green]")


@app.command("check")
def check(
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Report models with duplicate positions or no featured image."""
    logger = setup_cli_logging("gallery", verbose)
    problems = 0
    with Session(engine) as session:
        store = CollectionStore(session)
        for model in session.exec(select(PortfolioModel)).all():
            label = model.slug or str(model.id)
            logger.debug("Checking %s", label)
            duplicates = store.duplicate_positions(model.id)
            if duplicates:
                problems += 1
                console.print(f"[red]{label}: duplicate positions {duplicates}[/red]")
            positions = store.current_positions(model.id).values()
            if positions and FEATURED_POSITION not in positions:
                problems += 1
                console.print(
                    f"[yellow]{label}: no image at position {FEATURED_POSITION} "
                    f"(lowest is {min(positions)})[/yellow]"
                )

    if problems:
        raise typer.Exit(code=1)
    console.print("[green]All galleries consistent[/green]")

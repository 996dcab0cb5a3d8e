"""CLI for tmxplorer (inspect and search TMX translation memories)."""

import asyncio
import json
import re
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from tmxplorer.config import PAGE_SIZE, RESULT_CAP
from tmxplorer.core.importer.loader import LoadedDocument, load_tmx_file
from tmxplorer.core.search.engine import SearchMode
from tmxplorer.core.view.cards import (
    render_summary,
    render_unit_card,
    summary_to_dict,
    unit_to_dict,
)
from tmxplorer.core.view.pagination import Page, paginate
from tmxplorer.errors import DecodeFailure
from tmxplorer.logging_config import configure_logging
from tmxplorer.models.unit import QueryResult
from tmxplorer.session import SearchSession

app = typer.Typer(help="tmxplorer: inspect and search TMX translation memories.")

_BATCH_SEPARATORS = re.compile(r"[\n,]")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)


def parse_batch_input(text: str) -> list[str]:
    """Split pasted identifiers on newlines and commas, dropping blanks."""
    return [part.strip() for part in _BATCH_SEPARATORS.split(text) if part.strip()]


def _load(path: Path) -> LoadedDocument:
    """Load a TMX file, exiting with a single message on failure."""
    try:
        return load_tmx_file(path)
    except DecodeFailure as e:
        logger.error("Failed to parse TMX structure in {}: {}", path, e)
        raise typer.Exit(1) from e
    except OSError as e:
        logger.error("Failed to read {}: {}", path, e)
        raise typer.Exit(1) from e


async def _search(
    document: LoadedDocument,
    mode: SearchMode,
    query: str,
    batch_ids: list[str],
) -> QueryResult:
    async with SearchSession() as session:
        await session.load(document)
        result = await session.search(mode, query, batch_ids)
    if result is None:
        msg = "Search reply was superseded in a single-query session"
        raise RuntimeError(msg)
    return result


@app.command()
def stats(
    tmx_file: Path = typer.Argument(..., help="TMX file to inspect"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show header information and unit counts."""
    document = _load(tmx_file)
    if output_json:
        data = summary_to_dict(document.summary)
        data["skipped_units"] = document.skipped_units
        typer.echo(json.dumps(data, indent=2))
    else:
        typer.echo(render_summary(document.summary), nl=False)
        if document.skipped_units:
            typer.echo(f"Skipped units:    {document.skipped_units}")


@app.command()
def search(
    tmx_file: Path = typer.Argument(..., help="TMX file to search"),
    query: str = typer.Argument("", help="Search text (empty shows all units)"),
    mode: Annotated[
        SearchMode,
        typer.Option("--mode", "-m", help="Match mode"),
    ] = SearchMode.FULL_TEXT,
    batch: Annotated[
        str | None,
        typer.Option("--batch", "-b", help="Segment ids separated by commas or newlines"),
    ] = None,
    page: int = typer.Option(1, "--page", "-p", help="Page number (1-based)"),
    page_size: int = typer.Option(PAGE_SIZE, "--page-size", "-n", help="Results per page"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Search translation units by text or segment id."""
    if page_size < 1:
        typer.echo("--page-size must be at least 1.")
        raise typer.Exit(1)

    batch_ids: list[str] = []
    if batch is not None:
        mode = SearchMode.BATCH_ID
        batch_ids = parse_batch_input(batch)

    document = _load(tmx_file)
    result = asyncio.run(_search(document, mode, query, batch_ids))
    current: Page = paginate(
        result.positions,
        total_units=document.summary.total_units,
        page=page,
        page_size=page_size,
    )
    units = document.units

    if output_json:
        data = {
            "results": [unit_to_dict(units[p], position=p) for p in current.items],
            "count": len(current.items),
            "total": current.total_results,
            "page": current.page,
            "total_pages": current.total_pages,
            "filtered": result.positions is not None,
            "truncated": result.truncated,
        }
        typer.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    typer.echo(
        f"Page {current.page} of {current.total_pages} | {current.total_results} results\n"
    )
    if result.truncated:
        typer.echo(f"Showing the first {RESULT_CAP} matches only; refine the query.\n")
    if not current.items:
        typer.echo("No translation units found matching your search.")
        return
    for position in current.items:
        typer.echo(render_unit_card(units[position]))


@app.command()
def show(
    tmx_file: Path = typer.Argument(..., help="TMX file"),
    unit_id: str = typer.Argument(..., help="Translation unit id (tuid or generated-N)"),
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Show a single translation unit."""
    document = _load(tmx_file)
    unit = document.find_unit(unit_id)
    if unit is None:
        typer.echo(f"Unit '{unit_id}' not found.")
        raise typer.Exit(1)

    if output_json:
        typer.echo(json.dumps(unit_to_dict(unit), indent=2, ensure_ascii=False))
    else:
        typer.echo(render_unit_card(unit), nl=False)

"""Command line interface for inspecting status catalogs."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer

from statusflow.catalog import Catalog, Status, check_catalog, load_catalog
from statusflow.engine import detect_path, resolve_fields
from statusflow.errors import CatalogError, StatusFlowError

app = typer.Typer(help="CLI for statusflow catalogs")

catalog_app = typer.Typer(help="Commands for checking and browsing catalogs")

app.add_typer(catalog_app, name="catalog")


@app.callback()
def main() -> None:
    """statusflow CLI entry point."""
    pass


def _load(path: Path) -> Catalog:
    try:
        return load_catalog(path, strict=False)
    except CatalogError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)


@catalog_app.command("check")
def catalog_check(path: Path) -> None:
    """
    Run authoring-time checks against a catalog file.

    Reports every duplicate id, missing or extra default, dangling child
    status, option mapping outside the declared options, field name that
    contains the key separator, and branch cycle.

    Example:
        statusflow catalog check ./catalog.yaml
    """
    catalog = _load(path)
    issues = check_catalog(catalog)
    if not issues:
        typer.echo(f"Catalog OK: {len(catalog)} statuses")
        return
    for issue in issues:
        typer.secho(f"- {issue}", fg=typer.colors.RED)
    raise typer.Exit(code=1)


def _echo_tree(catalog: Catalog, status: Status, indent: int, trail: set[str]) -> None:
    flags = [
        label
        for label, on in (("default", status.is_default_status), ("final", status.is_final_status))
        if on
    ]
    suffix = f" [{', '.join(flags)}]" if flags else ""
    typer.echo(f"{'  ' * indent}{status.name} ({status.id}){suffix}")
    if status.is_final_status:
        return
    for field in status.branching_fields:
        for option in field.options:
            child_id = field.child_for(option)
            if child_id is None:
                continue
            typer.echo(f"{'  ' * (indent + 1)}{field.name} = {option}")
            if child_id in trail or child_id not in catalog:
                typer.echo(f"{'  ' * (indent + 2)}! {child_id}")
                continue
            _echo_tree(catalog, catalog.get(child_id), indent + 2, trail | {child_id})


@catalog_app.command("tree")
def catalog_tree(path: Path) -> None:
    """
    Print the status tree, one branch option per line.

    Example:
        statusflow catalog tree ./catalog.yaml
        # Output: New (new) [default]
        #           Outcome = Interested
        #             Meeting (meeting)
    """
    catalog = _load(path)
    for status in catalog.top_level_statuses:
        _echo_tree(catalog, status, 0, {status.id})


@app.command("fields")
def fields(
    path: Path,
    root: Optional[str] = typer.Option(None, help="Root status id (default status if omitted)"),
    data: str = typer.Option("{}", help="Lead data as a JSON object"),
) -> None:
    """
    Show the detected path and the fields to render for some lead data.

    Example:
        statusflow fields ./catalog.yaml --data '{"Outcome": "Interested"}'
        # Output: Path: new > meeting
        #         Outcome (select, required) [New]
        #         Outcome_Interested_Next Meeting Date (date, required) [Meeting]
    """
    catalog = _load(path)
    try:
        values = json.loads(data)
    except json.JSONDecodeError as exc:
        typer.secho(f"Invalid JSON data: {exc}", fg=typer.colors.RED)
        raise typer.Exit(code=1)
    if not isinstance(values, dict):
        typer.secho("Lead data must be a JSON object", fg=typer.colors.RED)
        raise typer.Exit(code=1)

    try:
        root_id = root or catalog.default_status.id
        detected = detect_path(root_id, values, catalog)
        specs = resolve_fields(detected, catalog)
    except StatusFlowError as exc:
        typer.secho(str(exc), fg=typer.colors.RED)
        raise typer.Exit(code=1)

    typer.echo(f"Path: {' > '.join(detected.status_ids)}")
    for spec in specs:
        flag = "required" if spec.required else "optional"
        typer.echo(f"{spec.key} ({spec.type.value}, {flag}) [{spec.status_name}]")


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    app()

import json
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .catalog import SORT_KEYS, find_element, list_elements
from .config import Config, setup_logging
from .pipeline import PassSheet, TariffSheet, evaluate_tariff, format_score
from .routine import RoutineMeta

app = typer.Typer(help="Tumbling tariff: pass legality and bonus calculator.")
console = Console()


def _split_ids(raw: Optional[str]) -> List[Optional[str]]:
    """Comma-separated ids; empty entries ("a,,b" or "-") become empty slots."""
    if not raw:
        return []
    return [part.strip() if part.strip() not in ("", "-") else None for part in raw.split(",")]


def _warn_unknown(ids: List[Optional[str]]) -> None:
    unknown = [i for i in ids if i and find_element(i) is None]
    if unknown:
        console.print(f"[yellow]Unknown element ids (no direction rules apply):[/yellow] {escape(', '.join(str(u) for u in unknown))}")


def _pass_table(sheet: PassSheet, lang: str) -> Table:
    table = Table(title=f"Pass {sheet.number}")
    table.add_column("#", style="cyan")
    table.add_column("Element", style="green")
    table.add_column("Symbol")
    table.add_column("Value", justify="right")
    table.add_column("Bonus", justify="right")
    table.add_column("", justify="center")

    for i, slot in enumerate(sheet.slots):
        if slot is None:
            table.add_row(str(i + 1), "", "", "", "", "")
            continue
        element = find_element(slot.element_id)
        bad = i in sheet.bad_indices
        table.add_row(
            str(i + 1),
            element.name(lang) if element else escape(slot.element_id),
            element.symbol if element else "?",
            format_score(slot.difficulty_value),
            format_score(sheet.bonus.per_slot[i]) if sheet.bonus.per_slot[i] else "",
            "[bold red]✗[/bold red]" if bad else "",
            style="red" if bad else None,
        )
    table.add_section()
    table.add_row(
        "",
        "Total",
        "",
        format_score(sheet.difficulty_total),
        format_score(sheet.bonus_total),
        format_score(sheet.total_with_bonus),
    )
    return table


def _render_sheet(sheet: TariffSheet) -> None:
    for pass_sheet, pass_legality in ((sheet.pass1, sheet.legality.pass1), (sheet.pass2, sheet.legality.pass2)):
        console.print(_pass_table(pass_sheet, sheet.lang))
        for msg in sorted(pass_legality.messages):
            console.print(f"  [red]•[/red] {msg}")
    for msg in sorted(sheet.legality.cross_messages):
        console.print(f"[red]• {msg}[/red]")

    if sheet.is_legal:
        body = f"[bold green]LEGAL[/bold green]  Grand total: {format_score(sheet.grand_total)}"
        style = "green"
    else:
        body = f"[bold red]ILLEGAL[/bold red]  Grand total: {format_score(sheet.grand_total)}"
        style = "red"
    console.print(Panel.fit(body, title="Tariff", border_style=style))


def _emit(sheet: TariffSheet, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(sheet.to_dict(), indent=2, ensure_ascii=False))
    else:
        _render_sheet(sheet)


@app.callback()
def _main(log_level: Optional[str] = typer.Option(None, "--log-level", help="Override LOG_LEVEL.")):
    setup_logging(log_level)


@app.command()
def elements(
    sort: str = typer.Option("difficulty", "--sort", help=f"One of: {', '.join(SORT_KEYS)}."),
    desc: bool = typer.Option(False, "--desc", help="Descending order."),
    lang: str = typer.Option(Config.TARIFF_LANG, "--lang"),
):
    """List the element catalog."""
    if sort not in SORT_KEYS:
        console.print(f"[red]Unknown sort key:[/red] {sort}")
        raise typer.Exit(code=1)
    table = Table(title="Elements")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="green")
    table.add_column("Symbol")
    table.add_column("Value", justify="right")
    table.add_column("Direction")
    for e in list_elements(sort, descending=desc, lang=lang):
        table.add_row(e.id, e.name(lang), e.symbol, format_score(e.value), e.direction.value)
    console.print(table)


@app.command()
def evaluate(
    pass1: str = typer.Option("", "--pass1", help="Comma-separated element ids for pass 1."),
    pass2: str = typer.Option("", "--pass2", help="Comma-separated element ids for pass 2."),
    track: Optional[str] = typer.Option(None, "--track", help="league / national / international."),
    level: Optional[str] = typer.Option(None, "--level"),
    gender: Optional[str] = typer.Option(None, "--gender", help="F or M."),
    lang: str = typer.Option(Config.TARIFF_LANG, "--lang"),
    no_bonus: bool = typer.Option(False, "--no-bonus", help="Disable automatic bonuses."),
    as_json: bool = typer.Option(False, "--json", help="Print the sheet as JSON."),
):
    """Validate a routine and compute its bonuses."""
    ids1 = _split_ids(pass1)
    ids2 = _split_ids(pass2)
    if not as_json:
        _warn_unknown(ids1 + ids2)
    meta = RoutineMeta.from_raw(track, level, gender)
    sheet = evaluate_tariff(ids1, ids2, meta, lang=lang, auto_bonus=not no_bonus)
    _emit(sheet, as_json)


@app.command("evaluate-file")
def evaluate_file(
    path: Path = typer.Argument(..., help="JSON file with pass1, pass2, track, level, gender, lang."),
    as_json: bool = typer.Option(False, "--json", help="Print the sheet as JSON."),
):
    """Validate a routine stored in a JSON file."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[bold red]Could not read routine file:[/bold red] {e}")
        raise typer.Exit(code=1)
    if not isinstance(data, dict):
        console.print("[bold red]Routine file must contain a JSON object.[/bold red]")
        raise typer.Exit(code=1)
    ids1 = data.get("pass1") or []
    ids2 = data.get("pass2") or []
    if not isinstance(ids1, list) or not isinstance(ids2, list):
        console.print("[bold red]pass1 and pass2 must be lists of element ids.[/bold red]")
        raise typer.Exit(code=1)
    ids1 = [None if i in (None, "") else str(i) for i in ids1]
    ids2 = [None if i in (None, "") else str(i) for i in ids2]
    if not as_json:
        _warn_unknown(ids1 + ids2)
    meta = RoutineMeta.from_raw(data.get("track"), data.get("level"), data.get("gender"))
    sheet = evaluate_tariff(
        ids1,
        ids2,
        meta,
        lang=data.get("lang") or Config.TARIFF_LANG,
        auto_bonus=bool(data.get("auto_bonus", True)),
    )
    _emit(sheet, as_json)


def main():
    app()

if __name__ == "__main__":
    main()

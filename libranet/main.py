import logging
from datetime import datetime, timedelta
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.prompt import IntPrompt, Prompt
from rich.table import Table

from libranet.config import settings
from libranet.duration import BorrowDuration
from libranet.exceptions import InvalidInputError, LibraryError
from libranet.lending import LendingService
from libranet.utils.ui_helpers import print_account, print_item_list, set_output_mode
from libranet.utils.validators import TextValidator

APP_NAME = settings.app_name
ITEM_KINDS = {"1": "Book", "2": "Audiobook", "3": "EMagazine"}

console = Console()

app = typer.Typer(help=f"{APP_NAME} lending library CLI")


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_service() -> LendingService:
    """Fresh in-memory service, seeded with the demo catalogue when configured."""
    service = LendingService()
    if settings.seed_demo_data:
        service.seed_demo_catalog()
    return service


@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options; with no sub-command the interactive menu starts."""
    _configure_logging()
    if output:
        set_output_mode(output)
    if ctx.invoked_subcommand is None:
        run_menu()


@app.command("due")
def cli_due(
    duration: str = typer.Argument(..., help="e.g. '10 days', '2 weeks', 'P14D', '2024-01-01 to 2024-01-10'"),
    start: Optional[str] = typer.Option(None, "--start", "-s", help="Borrow start as ISO date/time (default: now)"),
):
    """Show the due date a borrow duration would produce."""
    try:
        borrow_start = datetime.fromisoformat(start) if start else datetime.now()
    except ValueError:
        print(f"Error: invalid start time '{start}'")
        raise typer.Exit(code=1)
    try:
        due = BorrowDuration.parse(duration).compute_due_at(borrow_start)
    except InvalidInputError as e:
        print(f"Error: {e}")
        raise typer.Exit(code=1)
    print(f"Due at: {due:%Y-%m-%d %H:%M}")


# ------------------------- Menu actions ------------------------- #
def borrow(service: LendingService) -> None:
    user_id = IntPrompt.ask("User id")
    item_id = IntPrompt.ask("Item id")
    duration = Prompt.ask("Duration (e.g. 10 days, 2 weeks, P14D, YYYY-MM-DD to YYYY-MM-DD)")
    record = service.borrow_item(user_id, item_id, duration)
    console.print(f"[green]Borrowed item {item_id} by user {user_id}.[/] Due at {record.due_at:%Y-%m-%d %H:%M}")


def return_item(service: LendingService) -> None:
    user_id = IntPrompt.ask("User id")
    item_id = IntPrompt.ask("Item id")
    fine = service.return_item(user_id, item_id)
    if fine:
        console.print(f"[yellow]Applied fine {fine.amount} for user {user_id} on item {item_id}[/]")
    else:
        console.print("[green]No fine. Item returned on time.[/]")


def archive(service: LendingService) -> None:
    item_id = IntPrompt.ask("Magazine item id")
    service.archive_magazine(item_id)
    console.print(f"[green]Archived magazine item {item_id}[/]")


def search(service: LendingService) -> None:
    type_name = Prompt.ask("Type (Book/Audiobook/EMagazine)").strip()
    print_item_list(service.search_by_type(type_name), type_name)


def add_item(service: LendingService) -> None:
    kind = Prompt.ask("Item type: 1=Book, 2=Audiobook, 3=EMagazine", choices=["1", "2", "3"])
    item_id = IntPrompt.ask("Item id")
    title = Prompt.ask("Title")
    authors = TextValidator.split_authors(Prompt.ask("Authors (comma separated)", default="Unknown"))

    if kind == "1":
        pages = IntPrompt.ask("Page count")
        service.add_book(item_id, title, authors, page_count=pages)
    elif kind == "2":
        hours = IntPrompt.ask("Duration (hours)")
        narrator = Prompt.ask("Narrator", default="")
        service.add_audiobook(item_id, title, authors, timedelta(hours=hours), narrator=narrator)
    else:
        issue = IntPrompt.ask("Issue number")
        service.add_magazine(item_id, title, authors, issue_number=issue)

    console.print(f"[green]{ITEM_KINDS[kind]} added:[/] {escape(title.strip())}")


def add_user(service: LendingService) -> None:
    user_id = IntPrompt.ask("User id")
    name = Prompt.ask("Name")
    limit = IntPrompt.ask("Borrow limit", default=settings.default_borrow_limit)
    service.add_user(name, borrow_limit=limit, user_id=user_id)
    console.print(f"[green]User added:[/] {escape(name.strip())} (id={user_id})")


def show_account(service: LendingService) -> None:
    user_id = IntPrompt.ask("User id")
    records = service.borrow_history(user_id)
    fines = service.fines_for_user(user_id)
    print_account(records, fines, service.total_fines_for_user(user_id))


MENU_ACTIONS = {
    "1": ("Borrow item", borrow),
    "2": ("Return item", return_item),
    "3": ("Archive magazine", archive),
    "4": ("Search by type", search),
    "5": ("Add item", add_item),
    "6": ("Add user", add_user),
    "7": ("Show account", show_account),
}


def run_menu(service: Optional[LendingService] = None) -> None:
    """Interactive menu; domain errors are reported and the loop keeps going."""
    service = service or build_service()

    def render_menu() -> None:
        table = Table.grid(padding=(0, 2))
        table.add_column(justify="right", style="bold cyan", width=4)
        table.add_column(justify="left", style="white")
        for key, (label, _) in MENU_ACTIONS.items():
            table.add_row(f"[reverse]{key}[/]", label)
        table.add_row("[reverse]0[/]", "Exit")
        console.print(Panel(table, title=APP_NAME, border_style="cyan", box=box.HEAVY, padding=(0, 2)))

    while True:
        render_menu()
        try:
            choice = Prompt.ask("Choice", choices=[*MENU_ACTIONS, "0"], default="0").strip()
            if choice == "0":
                break
            _, action = MENU_ACTIONS[choice]
            action(service)
        except LibraryError as e:
            console.print(f"[bold red]Error:[/] {escape(str(e))}")
        except EOFError:
            break
        print()

    console.print(f"Exiting {APP_NAME}...")


def run() -> None:
    app()


if __name__ == "__main__":
    run()

import os
import json
from typing import List

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from libranet.items import Item
from libranet.records import BorrowRecord, Fine
from libranet.money import Money

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def print_item_list(items: List[Item], type_name: str) -> None:
    """Print search results in the current output mode.
    - plain: 'Found: <id> - <title>' lines, or 'No items found of type X'
    - json: JSON array of item dicts
    - rich: Rich table
    """
    mode = get_output_mode()

    if not items:
        print(f"No items found of type {type_name}")
        return

    if mode == "json":
        print(json.dumps([item.to_dict() for item in items], ensure_ascii=False))
    elif mode == "rich":
        table = Table(title=f"{type_name} items", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True)
        table.add_column("Title", style="white")
        table.add_column("Authors", style="white")
        table.add_column("Status", style="white")
        for item in items:
            table.add_row(str(item.id), escape(item.title), escape(", ".join(item.authors)), item.status.value)
        _console.print(table)
    else:
        for item in items:
            print(f"Found: {item.id} - {item.title}")


def print_account(records: List[BorrowRecord], fines: List[Fine], total: Money) -> None:
    """Print a user's loans and fines in the current output mode."""
    mode = get_output_mode()

    if mode == "json":
        payload = {
            "borrows": [r.to_dict() for r in records],
            "fines": [f.to_dict() for f in fines],
            "total_fines": str(total),
        }
        print(json.dumps(payload, ensure_ascii=False))
        return

    if mode == "rich":
        table = Table(title="Borrows", show_lines=True, header_style="bold cyan")
        table.add_column("Record", style="magenta", no_wrap=True)
        table.add_column("Item", style="white")
        table.add_column("Due", style="white")
        table.add_column("Status", style="white")
        for r in records:
            table.add_row(str(r.id), str(r.item_id), r.due_at.strftime("%Y-%m-%d %H:%M"), r.effective_status().value)
        _console.print(table)
        for f in fines:
            _console.print(f"[yellow]Fine #{f.id}[/] {f.amount} on item {f.item_id}: {escape(f.reason)}")
        _console.print(f"[bold]Total fines:[/] {total}")
        return

    if not records:
        print("No borrow records.")
    for r in records:
        print(f"Record {r.id}: item {r.item_id} due {r.due_at:%Y-%m-%d %H:%M} [{r.effective_status().value}]")
    for f in fines:
        print(f"Fine {f.id}: {f.amount} on item {f.item_id} ({f.reason})")
    print(f"Total fines: {total}")

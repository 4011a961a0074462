#!/usr/bin/env python3
# Example usage of embedded_json_store
# Creates data/people.json next to this script, runs every kind of operation
# and prints the collection after each step.

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from embedded_json_store import DuplicateIdError, JsonStore, where

_console = Console()


@dataclass
class Person:
    id: Optional[str] = None
    name: Optional[str] = None
    city: Optional[str] = None
    cars: List[str] = field(default_factory=list)
    job: Optional[str] = None


def show(title: str, store: JsonStore) -> None:
    table = Table(title=title)
    for name in store.schema.names:
        table.add_column(name)
    for p in store.select_all():
        table.add_row(p.id or "", p.name or "", p.city or "", ", ".join(p.cars), p.job or "")
    _console.print(table)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s", handlers=[RichHandler(console=_console)])

    path = os.path.join(os.path.dirname(__file__), "data", "people.json")
    store = JsonStore(path, Person, id_key="id", create_if_missing=True, indent=2)
    store.delete_all()

    store.insert_multiple([
        Person("1", "John", "New York", ["Bmw", "Audi"], "Software Engineer"),
        Person("2", "Mark", "San Francisco", ["Mercedes"], "Data Scientist"),
        Person("3", "Alice", "New York", ["Tesla"], "Product Manager"),
    ])
    show("after insert_multiple", store)

    try:
        store.insert(Person("1", "Clone"))
    except DuplicateIdError as e:
        _console.print(f"[red]rejected:[/red] {e}")

    _console.print("in New York:", [p.name for p in store.select_by_key("city", "new york")])
    _console.print("names and cars:", store.select_keys("name", "cars"))

    store.update_where(where(id="2"), {"name": "George", "city": "Texas"})
    store.update_where(lambda p: p.city == "New York", "job", "Retired")
    show("after updates", store)

    store.delete_where({"city": "New York"})
    show("after delete_where", store)


if __name__ == "__main__":
    main()

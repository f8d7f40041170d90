import os
from dataclasses import dataclass
from typing import Optional

from sql_wrapper import ReferentialIntegrityError, Schema, SchemaManager, SQLiteStore, column


@dataclass
class Item:
    Label: str = column("TEXT NOT NULL")


@dataclass
class Identification:
    Code: str = column("VARCHAR(32) NOT NULL")
    Target: Optional[Item] = column(name="ItemID", relation="one-to-one")


def run_example():
    db_path = "example_items.db"
    if os.path.exists(db_path):
        os.remove(db_path)

    print("--- sql_wrapper: One-to-One Example ---")

    with SQLiteStore(db_path) as store:
        manager = SchemaManager()
        items = Schema(store, Item, manager)
        identifications = Schema(store, Identification, manager)

        lamp = Item(Label="lamp")
        items.insert(lamp)
        tag = Identification(Code="LMP-001", Target=lamp)
        identifications.insert(tag)

        # A second identification for the same item violates UNIQUE
        try:
            identifications.insert(Identification(Code="LMP-002", Target=lamp))
        except ReferentialIntegrityError as e:
            print(f"Rejected: {e}")

        # The item cannot go while something still points at it
        try:
            items.delete(lamp)
        except ReferentialIntegrityError as e:
            print(f"Rejected: {e}")

        identifications.delete(tag)
        items.delete(lamp)
        print(f"Items left: {items.get()}")

    print("\nExample finished. Database saved to", db_path)


if __name__ == "__main__":
    run_example()

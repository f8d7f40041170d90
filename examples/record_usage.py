import os
from dataclasses import dataclass

from sql_wrapper import Schema, SchemaManager, SQLiteStore, column
from sql_wrapper.sql import create_table_sql


@dataclass
class Record:
    Name: str = column("VARCHAR(128)")
    Likes: int = column("INT")
    Type: str = column("TEXT")


def run_example():
    db_path = "example_records.db"
    if os.path.exists(db_path):
        os.remove(db_path)

    print("--- sql_wrapper: Record Example ---")

    with SQLiteStore(db_path) as store:
        manager = SchemaManager()

        # 1. Create the table
        records = Schema(store, Record, manager)
        print(f"Table: {records.name}")
        for statement in create_table_sql(records.plan):
            print(f"  {statement}")

        # 2. Insert a record
        record = Record(Name="Jack", Likes=20, Type="Original")
        identity = records.insert(record)
        print(f"Inserted {record} as {identity}")

        # 3. Update it in place
        record.Name = "John"
        records.save(record)
        print(f"Stored rows: {store.query(records.select_sql())}")

        # 4. Delete it
        records.delete(record)
        print(f"Remaining: {records.get()}")

    print("\nExample finished. Database saved to", db_path)


if __name__ == "__main__":
    run_example()

"""
Example 01: Saving, Loading and Deleting Aggregates

This example declares a small project aggregate and persists it to SQLite
with one call per operation.
"""

import tempfile
from pathlib import Path

from row_aggregate import (
    ConnectionConfig,
    ConnectionManager,
    Engine,
    SqlAccessorFactory,
    delete,
    entity,
    load,
    relation_model,
    save,
    to_many,
    to_many_linked,
    to_one,
)

SCHEMA = [
    "CREATE TABLE customer (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)",
    "CREATE TABLE person (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT NOT NULL)",
    """
    CREATE TABLE project (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        customer_id INTEGER REFERENCES customer (id)
    )
    """,
    """
    CREATE TABLE task (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        title TEXT NOT NULL,
        project_id INTEGER REFERENCES project (id)
    )
    """,
    """
    CREATE TABLE project_person (
        project_id INTEGER REFERENCES project (id),
        person_id INTEGER REFERENCES person (id)
    )
    """,
]


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=db_path))
    engine = Engine(manager)
    for statement in SCHEMA:
        engine.execute(statement)

    # Tables, foreign keys and link tables follow naming defaults
    model = relation_model(
        entity(
            "project",
            to_one("customer", "customer", owned=False),
            to_many("tasks", "task"),
            to_many_linked("members", "person"),
        ),
        entity("task"),
        entity("person"),
        entity("customer"),
        factory=SqlAccessorFactory(engine),
    )

    print("=== Aggregates ===\n")

    # Everything is inserted in foreign-key order; generated ids come back
    project = save(
        model,
        "project",
        {
            "name": "Webapp",
            "customer": {"name": "ACME"},
            "tasks": [{"title": "Design"}, {"title": "Build"}],
            "members": [{"name": "Alice"}, {"name": "Bob"}],
        },
    )
    print(f"Saved project #{project['id']} for customer #{project['customer_id']}")

    # Drop a task and a member, add a task; orphans are reconciled
    project["tasks"] = [project["tasks"][0], {"title": "Ship"}]
    project["members"] = project["members"][:1]
    save(model, "project", project)

    loaded = load(model, "project", project["id"])
    print(f"Customer: {loaded['customer']['name']}")
    print(f"Tasks: {[task['title'] for task in loaded['tasks']]}")
    print(f"Members: {[member['name'] for member in loaded['members']]}")

    # Owned tasks go with the project; the customer and people stay
    removed = delete(model, "project", loaded)
    print(f"\nDeleted {removed} record(s)")
    print(f"Customers left: {engine.fetch_scalar('SELECT COUNT(*) FROM customer')}")
    print(f"People left: {engine.fetch_scalar('SELECT COUNT(*) FROM person')}")

    manager.close_pool()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()

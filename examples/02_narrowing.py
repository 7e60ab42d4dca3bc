"""
Example 02: Narrowing

This example shows how only() and without() scope a load or save to part of
the relation model.
"""

import tempfile
from pathlib import Path

from row_aggregate import (
    ConnectionConfig,
    ConnectionManager,
    Engine,
    SqlAccessorFactory,
    entity,
    load,
    only,
    relation_model,
    save,
    to_many,
    to_one,
    without,
)


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=db_path))
    engine = Engine(manager)
    engine.execute("CREATE TABLE person (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT)")
    engine.execute(
        "CREATE TABLE project (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, "
        "manager_id INTEGER REFERENCES person (id))"
    )
    engine.execute(
        "CREATE TABLE task (id INTEGER PRIMARY KEY AUTOINCREMENT, title TEXT, "
        "project_id INTEGER REFERENCES project (id), "
        "assignee_id INTEGER REFERENCES person (id))"
    )

    model = relation_model(
        entity("project", to_one("manager", "person", owned=False), to_many("tasks", "task")),
        entity(
            "task",
            to_one("project", "project", owned=False),
            to_one("assignee", "person", owned=False),
        ),
        entity("person"),
        factory=SqlAccessorFactory(engine),
    )

    save(
        model,
        "project",
        {
            "name": "Webapp",
            "manager": {"name": "Alice"},
            "tasks": [{"title": "Design", "assignee": {"name": "Bob"}}],
        },
    )

    print("=== Narrowing ===\n")

    # The full model follows every relation, including the way back
    task = load(model, "task", 1)
    print(f"Full: {task['title']} in {task['project']['name']}, led by "
          f"{task['project']['manager']['name']}, assigned to {task['assignee']['name']}")

    # without() drops entities or single relations
    task = load(without(model, "person"), "task", 1)
    print(f"Without person: {sorted(key for key in task if not key.startswith('__'))}")

    # only() keeps the named entities with exactly the named relations
    project = load(only(model, ("project", "tasks"), "task"), "project", 1)
    print(f"Only project.tasks: {[t['title'] for t in project['tasks']]}")

    # Saving through a narrowed model leaves the rest untouched. manager_id
    # is a plain column once the manager relation is narrowed away.
    project["name"] = "Webapp v2"
    project["tasks"] = []
    save(without(model, "task", ("project", "manager")), "project", project)
    print(f"Tasks after narrowed save: {engine.fetch_scalar('SELECT COUNT(*) FROM task')}")

    manager.close_pool()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()

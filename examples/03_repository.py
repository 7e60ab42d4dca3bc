"""
Example 03: Repositories and Transactions

This example wraps an aggregate root in an AggregateRepository. Every save
and delete runs in its own transaction unless the caller already opened one.
"""

import tempfile
from pathlib import Path

from row_aggregate import (
    AggregateRepository,
    ConnectionConfig,
    ConnectionManager,
    Engine,
    SqlAccessorFactory,
    StatementError,
    entity,
    relation_model,
    to_many,
)


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    manager = ConnectionManager(ConnectionConfig(driver="sqlite", database=db_path))
    engine = Engine(manager)
    engine.execute("CREATE TABLE orders (id INTEGER PRIMARY KEY AUTOINCREMENT, status TEXT)")
    engine.execute(
        "CREATE TABLE order_line (id INTEGER PRIMARY KEY AUTOINCREMENT, "
        "sku TEXT NOT NULL, qty INTEGER NOT NULL, "
        "order_id INTEGER REFERENCES orders (id))"
    )

    model = relation_model(
        entity("order", to_many("lines", "order_line"), table="orders"),
        entity("order_line"),
        factory=SqlAccessorFactory(engine),
    )
    orders = AggregateRepository(model, "order", engine)

    print("=== Repositories ===\n")

    # 1. One transaction per save
    order = orders.save({"status": "new", "lines": [{"sku": "A-1", "qty": 2}]})
    print(f"1. Saved order #{order['id']} with {len(order['lines'])} line(s)")

    # 2. A failing cascade leaves nothing behind
    try:
        orders.save({"status": "new", "lines": [{"sku": None, "qty": 1}]})
    except StatementError as e:
        print(f"2. Rolled back: {e}")
    count = engine.fetch_scalar("SELECT COUNT(*) FROM orders")
    print(f"   Orders in database: {count}")

    # 3. Several saves in one caller transaction
    with engine.transaction():
        order["status"] = "paid"
        orders.save(order)
        orders.save({"status": "new"})
    print(f"3. Orders in database: {engine.fetch_scalar('SELECT COUNT(*) FROM orders')}")

    # 4. Delete cascades to the owned lines
    print(f"4. Deleted {orders.delete(orders.load(order['id']))} record(s)")

    manager.close_pool()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()

import pytest

from ddlforge.architecture import TableSchema, UniqueConstraint
from ddlforge.errors import ConfigurationError
from ddlforge.sql.table import (
    build_add_columns,
    build_add_columns_guarded,
    build_add_constraints_guarded,
    build_column_comments,
    build_constraint_comments,
    build_create_table,
    build_drop_table,
    build_table_comment,
)


def test_create_users(users):
    assert build_create_table(users) == (
        "CREATE TABLE users (\n"
        "  id UUID PRIMARY KEY,\n"
        "  email TEXT NOT NULL UNIQUE\n"
        ");"
    )
    assert build_create_table(users, if_not_exists=True).startswith(
        "CREATE TABLE IF NOT EXISTS users (\n"
    )


def test_create_orders(orders):
    sql = build_create_table(orders)
    lines = sql.split("\n")
    assert lines[0] == "CREATE TABLE orders ("
    assert lines[1] == "  id UUID PRIMARY KEY DEFAULT gen_random_uuid(),"
    assert lines[3] == (
        "  status VARCHAR(20) NOT NULL DEFAULT 'pending' "
        "CHECK (status IN ('pending', 'paid', 'shipped')),"
    )
    assert lines[4] == "  total DECIMAL(10,2) NOT NULL DEFAULT 0 CHECK (total >= 0),"
    assert lines[-2] == "  CONSTRAINT orders_total_positive CHECK (total >= 0)"
    assert lines[-1] == ");"


def test_partitioned_table_with_composite_key(events):
    assert build_create_table(events) == (
        "CREATE TABLE events (\n"
        "  id BIGSERIAL,\n"
        "  created_at TIMESTAMP WITH TIME ZONE,\n"
        "  user_id UUID,\n"
        "  payload JSONB DEFAULT '{}'::jsonb,\n"
        "  PRIMARY KEY (id, created_at)\n"
        ") PARTITION BY RANGE (created_at);"
    )


def test_partition_column_folded_into_key():
    schema = TableSchema.from_dict(
        {
            "name": "readings",
            "columns": [
                {"name": "id", "type": "bigint", "primary_key": True},
                {"name": "region", "type": "text", "nullable": False},
            ],
            "constraints": [
                {"type": "unique", "name": "uq_readings_region_id", "columns": ["region", "id"]}
            ],
            "partition": {"type": "list", "columns": ["region"]},
        }
    )
    sql = build_create_table(schema)
    assert "  id BIGINT,\n" in sql
    assert sql.endswith(
        "  CONSTRAINT uq_readings_region_id UNIQUE (region, id),\n"
        "  PRIMARY KEY (id, region)\n"
        ") PARTITION BY LIST (region);"
    )


def test_explicit_nullability(users):
    sql = build_create_table(users, explicit_nullability=True)
    assert "  id UUID PRIMARY KEY NOT NULL,\n" in sql


def test_drop_table(users):
    assert build_drop_table(users) == "DROP TABLE IF EXISTS users CASCADE;"


def test_add_columns_skip_primary_key(users):
    assert build_add_columns(users) == [
        "ALTER TABLE users ADD COLUMN IF NOT EXISTS email TEXT NOT NULL UNIQUE;"
    ]


def test_add_columns_guarded(users):
    (block,) = build_add_columns_guarded(users)
    assert block == (
        "DO $$\n"
        "BEGIN\n"
        "  IF NOT EXISTS (SELECT 1 FROM information_schema.columns "
        "WHERE table_name = 'users' AND column_name = 'email') THEN\n"
        "    ALTER TABLE users ADD COLUMN email TEXT NOT NULL UNIQUE;\n"
        "  END IF;\n"
        "END $$;"
    )


def test_add_columns_guarded_empty():
    schema = TableSchema.from_dict(
        {"name": "keys", "columns": [{"name": "id", "type": "uuid", "primary_key": True}]}
    )
    assert build_add_columns_guarded(schema) == []
    assert build_add_columns(schema) == []


def test_add_constraints_guarded(orders):
    (block,) = build_add_constraints_guarded(orders)
    assert "SELECT 1 FROM pg_constraint WHERE conname = 'orders_total_positive'" in block
    assert (
        "ALTER TABLE orders ADD CONSTRAINT orders_total_positive CHECK (total >= 0);"
        in block
    )


def test_comments(orders):
    assert build_table_comment(orders) == [
        "COMMENT ON TABLE orders IS 'Customer orders';"
    ]
    assert build_column_comments(orders) == [
        "COMMENT ON COLUMN orders.created_at IS 'When the order was placed';"
    ]
    assert build_constraint_comments(orders) == []

    commented = orders.evolve(
        constraints=[
            UniqueConstraint(
                name="uq_orders_customer", columns=["customer_id"], comment="One's own"
            )
        ]
    )
    assert build_constraint_comments(commented) == [
        "COMMENT ON CONSTRAINT uq_orders_customer ON orders IS 'One''s own';"
    ]


def test_malformed_partition_rejected(events):
    broken = events.evolve(partition={"type": "range", "columns": []})
    with pytest.raises(
        ConfigurationError, match="Range partition must specify at least one column"
    ):
        build_create_table(broken)


def test_malformed_constraint_name_rejected(orders):
    broken = orders.evolve(
        constraints=[{"type": "check", "name": "bad name; DROP", "condition": "total > 0"}]
    )
    with pytest.raises(ConfigurationError, match="Constraint name must start"):
        build_create_table(broken)
    with pytest.raises(ConfigurationError, match="Constraint name must start"):
        build_add_constraints_guarded(broken)

import pytest
from pydantic import ValidationError

from ddlforge.architecture import (
    ColumnSchema,
    DatabaseIndex,
    ForeignKey,
    ForeignKeyAction,
    IndexMethod,
    PolicyCommand,
    RangePartition,
    TableSchema,
)
from ddlforge.errors import ConfigurationError


def test_load_users(users):
    assert users.name == "users"
    assert users.column_names == ["id", "email"]
    assert users.primary_key_columns == ["id"]
    assert not users.has_composite_primary_key
    assert users.enable_rls
    assert users.policies[0].command == PolicyCommand.ALL


def test_aliases(orders):
    status = orders.column("status")
    assert status is not None
    assert not status.is_nullable
    assert status.checks == ["status IN ('pending', 'paid', 'shipped')"]

    total = orders.column("total")
    assert total.check_constraints == ["total >= 0"]
    assert total.sql_type == "DECIMAL(10,2)"

    assert orders.indexes[1].condition == "status <> 'shipped'"
    fk = orders.foreign_keys[0]
    assert fk.references_table == "customers"
    assert fk.references_column == "id"
    assert fk.on_delete == ForeignKeyAction.CASCADE
    assert orders.column("missing") is None


def test_primary_key_column_is_not_null_and_unique():
    c = ColumnSchema(name="id", type="uuid", is_primary_key=True, is_nullable=True)
    assert not c.effective_nullable
    assert c.effective_unique
    assert not c.has_default


def test_duplicate_columns_rejected():
    with pytest.raises(ValidationError, match="Duplicate column name: id"):
        TableSchema(
            name="t",
            columns=[
                ColumnSchema(name="id", type="integer"),
                ColumnSchema(name="id", type="text"),
            ],
        )


def test_partition_columns_fold_into_primary_key():
    schema = TableSchema(
        name="measurements",
        columns=[
            ColumnSchema(name="id", type="bigserial", primary_key=True),
            ColumnSchema(name="taken_at", type="timestamptz", nullable=False),
        ],
        partition=RangePartition(columns=["taken_at"]),
    )
    assert schema.primary_key_columns == ["id"]
    assert schema.effective_primary_key == ["id", "taken_at"]
    assert not schema.has_composite_primary_key
    assert schema.has_composite_effective_primary_key


def test_no_declared_key_stays_without_key():
    schema = TableSchema(
        name="log",
        columns=[ColumnSchema(name="at", type="timestamptz")],
        partition=RangePartition(columns=["at"]),
    )
    assert schema.effective_primary_key == []


def test_events_key(events):
    assert events.primary_key_columns == ["id", "created_at"]
    assert events.effective_primary_key == ["id", "created_at"]
    assert events.has_composite_primary_key


def test_required_extensions(orders, users):
    assert orders.required_extensions == ["pgcrypto"]
    assert users.required_extensions == []


def test_index_names():
    assert (
        DatabaseIndex(columns=["status", "created_at"]).effective_name("orders")
        == "idx_orders_status_created_at"
    )
    assert (
        DatabaseIndex(columns=["email"], unique=True).effective_name("users")
        == "idx_unique_users_email"
    )
    assert DatabaseIndex(name="by_email", columns=["email"]).effective_name("u") == (
        "by_email"
    )
    expr = DatabaseIndex(expression="lower(email)")
    name = expr.effective_name("users")
    assert name.startswith("idx_users_expr_")
    assert len(name) == len("idx_users_expr_") + 8
    assert name == DatabaseIndex(expression="lower(email)").effective_name("users")


def test_index_parsing():
    idx = DatabaseIndex.model_validate(
        {"columns": "tags", "using": "GIN", "include": "id"}
    )
    assert idx.columns == ["tags"]
    assert idx.method is IndexMethod.GIN
    assert idx.include == ["id"]


def test_index_validation():
    DatabaseIndex(columns=["a", "b"], include=["c"], fill_factor=90).validate()
    cases = [
        (DatabaseIndex(columns=["a"], expression="lower(a)"), "both columns"),
        (DatabaseIndex(), "columns or an expression"),
        (DatabaseIndex(expression="  "), "expression cannot be empty"),
        (DatabaseIndex(columns=["a", "b"], method="hash"), "single column"),
        (DatabaseIndex(columns=["a"], method="hash", descending=True), "ordering"),
        (DatabaseIndex(columns=["a"], method="gin", include=["b"]), "INCLUDE"),
        (DatabaseIndex(columns=["a"], method="brin", unique=True), "cannot be unique"),
        (DatabaseIndex(columns=["a"], fill_factor=5), "between 10 and 100"),
        (DatabaseIndex(columns=["a"], method="gin", fill_factor=50), "Fill factor"),
        (
            DatabaseIndex(columns=["a"], storage_parameters={"fastupdate": True}),
            "fastupdate",
        ),
    ]
    for index, message in cases:
        with pytest.raises(ConfigurationError, match=message):
            index.validate()


def test_storage_parameters_rendering():
    idx = DatabaseIndex(
        columns=["doc"],
        method="gin",
        storage_parameters={"fastupdate": False, "gin_pending_list_limit": 4096},
    )
    assert idx.rendered_storage_parameters == [
        "fastupdate = off",
        "gin_pending_list_limit = 4096",
    ]
    assert DatabaseIndex(columns=["a"], fill_factor=70).rendered_storage_parameters == [
        "fillfactor = 70"
    ]


def test_foreign_key_defaults_and_name():
    fk = ForeignKey.model_validate(
        {"column": "owner_id", "table": "users", "on_delete": "SET NULL"}
    )
    assert fk.on_delete is ForeignKeyAction.SET_NULL
    assert fk.on_update is ForeignKeyAction.NO_ACTION
    assert fk.effective_name("projects") == "fk_projects_owner_id_users_id"
    assert ForeignKey(column="x").references_table == ""


def test_policy_aliases():
    schema = TableSchema.from_dict(
        {
            "name": "docs",
            "columns": [{"name": "id", "type": "uuid", "primary_key": True}],
            "policies": [
                {
                    "name": "readers",
                    "for": "SELECT",
                    "to": "reader",
                    "using": "true",
                }
            ],
        }
    )
    policy = schema.policies[0]
    assert policy.command is PolicyCommand.SELECT
    assert policy.roles == ["reader"]
    assert policy.permissive


def test_evolve_returns_validated_copy(users):
    renamed = users.evolve(name="accounts")
    assert renamed.name == "accounts"
    assert users.name == "users"
    assert renamed.columns == users.columns
    with pytest.raises(ValidationError):
        users.evolve(columns=users.columns + users.columns[:1])


def test_frozen(users):
    with pytest.raises(ValidationError):
        users.name = "other"


def test_yaml_round_trip(orders, tmp_path):
    path = tmp_path / "orders.yaml"
    orders.to_yaml(str(path))
    loaded = TableSchema.from_yaml(str(path))
    assert loaded == orders


def test_to_dict_skips_defaults(users):
    data = users.to_dict(skip_defaults=True)
    assert data["name"] == "users"
    assert "indexes" not in data
    assert data["columns"][1]["nullable"] is False

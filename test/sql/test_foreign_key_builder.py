import pytest

from ddlforge.architecture import ForeignKey, TableSchema
from ddlforge.errors import ConfigurationError
from ddlforge.sql.foreign_key import build_foreign_key, build_foreign_keys


@pytest.fixture()
def memberships():
    return TableSchema.from_dict(
        {
            "name": "memberships",
            "columns": [
                {"name": "id", "type": "bigserial", "primary_key": True},
                {"name": "team_id", "type": "bigint", "nullable": False},
                {"name": "user_id", "type": "uuid"},
            ],
            "foreign_keys": [
                {
                    "column": "user_id",
                    "table": "users",
                    "on_delete": "set null",
                    "on_update": "cascade",
                    "comment": "Member's account",
                },
                {"column": "team_id", "table": "teams", "name": "fk_team"},
                {"column": "team_id", "table": "other_teams"},
            ],
        }
    )


def test_orders_foreign_key(orders):
    assert build_foreign_keys(orders) == [
        "ALTER TABLE orders ADD CONSTRAINT fk_orders_customer_id_customers_id "
        "FOREIGN KEY (customer_id) REFERENCES customers(id) ON DELETE CASCADE;"
    ]


def test_column_order_and_first_wins(memberships):
    statements = build_foreign_keys(memberships)
    assert statements == [
        "ALTER TABLE memberships ADD CONSTRAINT fk_team "
        "FOREIGN KEY (team_id) REFERENCES teams(id);",
        "ALTER TABLE memberships ADD CONSTRAINT fk_memberships_user_id_users_id "
        "FOREIGN KEY (user_id) REFERENCES users(id) "
        "ON DELETE SET NULL ON UPDATE CASCADE;",
        "COMMENT ON CONSTRAINT fk_memberships_user_id_users_id ON memberships "
        "IS 'Member''s account';",
    ]
    assert len(build_foreign_keys(memberships, comments=False)) == 2


def test_deferrable_not_valid(memberships):
    fk = ForeignKey(
        column="team_id",
        references_table="teams",
        references_column="team_id",
        on_delete="restrict",
        deferrable=True,
        initially_deferred=True,
        not_valid=True,
    )
    assert build_foreign_key(memberships, fk) == (
        "ALTER TABLE memberships ADD CONSTRAINT fk_memberships_team_id_teams_team_id "
        "FOREIGN KEY (team_id) REFERENCES teams(team_id) ON DELETE RESTRICT "
        "DEFERRABLE INITIALLY DEFERRED NOT VALID;"
    )


def test_missing_target_table(orders):
    broken = orders.evolve(foreign_keys=[{"column": "customer_id"}])
    with pytest.raises(
        ConfigurationError,
        match="Foreign key on orders.customer_id has no target table",
    ):
        build_foreign_keys(broken)


def test_unknown_column(orders):
    broken = orders.evolve(foreign_keys=[{"column": "shop_id", "table": "shops"}])
    with pytest.raises(ConfigurationError, match="unknown column 'shop_id'"):
        build_foreign_keys(broken)

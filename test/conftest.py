import logging

import pytest
import yaml

from ddlforge.architecture.table import TableSchema

logger = logging.getLogger(__name__)


@pytest.fixture()
def users_dict():
    tc = yaml.safe_load(
        """
        name: users
        enable_rls: true
        columns:
        -   name: id
            type: uuid
            is_primary_key: true
        -   name: email
            type: text
            is_nullable: false
            is_unique: true
        policies:
        -   name: own_data
            command: all
            condition: auth.uid() = id
    """
    )
    return tc


@pytest.fixture()
def users(users_dict):
    return TableSchema.from_dict(users_dict)


@pytest.fixture()
def orders_dict():
    tc = yaml.safe_load(
        """
        name: orders
        comment: Customer orders
        columns:
        -   name: id
            type: uuid
            primary_key: true
            default: gen_random_uuid()
        -   name: customer_id
            type: uuid
            nullable: false
        -   name: status
            type: varchar(20)
            nullable: false
            default: "'pending'"
            validators:
            -   type: enum
                values: [pending, paid, shipped]
        -   name: total
            type: decimal(10,2)
            nullable: false
            default: 0
            checks: total >= 0
        -   name: created_at
            type: timestamptz
            nullable: false
            default: CURRENT_TIMESTAMP
            comment: When the order was placed
        indexes:
        -   columns: [status, created_at]
        -   columns: [customer_id]
            where: status <> 'shipped'
        foreign_keys:
        -   column: customer_id
            table: customers
            on_delete: cascade
        constraints:
        -   type: check
            name: orders_total_positive
            condition: total >= 0
    """
    )
    return tc


@pytest.fixture()
def orders(orders_dict):
    return TableSchema.from_dict(orders_dict)


@pytest.fixture()
def events_dict():
    tc = yaml.safe_load(
        """
        name: events
        columns:
        -   name: id
            type: bigserial
            primary_key: true
        -   name: created_at
            type: timestamptz
            primary_key: true
        -   name: user_id
            type: uuid
        -   name: payload
            type: jsonb
            default: "'{}'::jsonb"
        partition:
            type: range
            columns: [created_at]
    """
    )
    return tc


@pytest.fixture()
def events(events_dict):
    return TableSchema.from_dict(events_dict)

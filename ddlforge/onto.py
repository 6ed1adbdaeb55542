"""Enumeration base and the migration mode enum.

Every closed set of values in ddlforge (column kinds, index methods,
referential actions, migration modes, ...) is a :class:`BaseEnum`: a string
enum whose members compare equal to their values, print as their values,
dump to YAML as plain strings, and support ``"value" in EnumClass`` checks
on raw strings.

Key Components:
    - BaseEnum: String enum base shared by all ddlforge enums
    - MigrationMode: The five strategies controlling how a table's DDL is emitted

Example:
    >>> "create-or-alter" in MigrationMode
    True
    >>> str(MigrationMode.ALTER_ONLY)
    'alter-only'
"""

from enum import EnumMeta

import yaml
from strenum import StrEnum


class MetaEnum(EnumMeta):
    """Enum metaclass whose ``in`` accepts raw values as well as members."""

    def __contains__(self, member: object) -> bool:
        if isinstance(member, self):
            return True
        try:
            self(member)
        except ValueError:
            return False
        return True


class BaseEnum(StrEnum, metaclass=MetaEnum):
    """String enum rendered as its value by ``str``, ``repr`` and YAML."""

    def __str__(self) -> str:
        return self.value

    def __repr__(self) -> str:
        return self.value


def _represent_as_value(dumper, data):
    return dumper.represent_scalar("tag:yaml.org,2002:str", str(data.value))


yaml.add_multi_representer(BaseEnum, _represent_as_value)
yaml.SafeDumper.add_multi_representer(BaseEnum, _represent_as_value)


class MigrationMode(BaseEnum):
    """Migration strategies for a table definition.

    The mode is chosen once per compilation; there are no transitions
    between modes within one call.

    Attributes:
        CREATE_ONLY: Plain CREATE TABLE, fails if the table exists
        CREATE_IF_NOT_EXISTS: CREATE TABLE IF NOT EXISTS
        CREATE_OR_ALTER: CREATE TABLE IF NOT EXISTS followed by conditional ADD COLUMN
        ALTER_ONLY: Conditional ADD COLUMN statements only
        DROP_AND_RECREATE: DROP TABLE ... CASCADE followed by CREATE TABLE
    """

    CREATE_ONLY = "create-only"
    CREATE_IF_NOT_EXISTS = "create-if-not-exists"
    CREATE_OR_ALTER = "create-or-alter"
    ALTER_ONLY = "alter-only"
    DROP_AND_RECREATE = "drop-and-recreate"

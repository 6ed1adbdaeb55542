"""Table model: value types and domain entities."""

from ddlforge.architecture.base import ConfigBaseModel
from ddlforge.architecture.column import ColumnSchema
from ddlforge.architecture.column_types import ColumnKind, ColumnType
from ddlforge.architecture.constraints import (
    CheckConstraint,
    HashPartition,
    ListPartition,
    PartitionStrategy,
    PrimaryKeyConstraint,
    RangePartition,
    TableConstraint,
    UniqueConstraint,
)
from ddlforge.architecture.default_values import DefaultKind, DefaultValue
from ddlforge.architecture.foreign_key import ForeignKey
from ddlforge.architecture.index import DatabaseIndex
from ddlforge.architecture.onto import ForeignKeyAction, IndexMethod, PolicyCommand
from ddlforge.architecture.policy import RlsPolicy
from ddlforge.architecture.table import TableSchema
from ddlforge.architecture.validators import ColumnValidator

__all__ = [
    "CheckConstraint",
    "ColumnKind",
    "ColumnSchema",
    "ColumnType",
    "ColumnValidator",
    "ConfigBaseModel",
    "DatabaseIndex",
    "DefaultKind",
    "DefaultValue",
    "ForeignKey",
    "ForeignKeyAction",
    "HashPartition",
    "IndexMethod",
    "ListPartition",
    "PartitionStrategy",
    "PolicyCommand",
    "PrimaryKeyConstraint",
    "RangePartition",
    "RlsPolicy",
    "TableConstraint",
    "TableSchema",
    "UniqueConstraint",
]

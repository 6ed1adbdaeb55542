"""Closed sets of SQL-semantic primitives shared by the table model.

This module defines the enumerations that parameterize table entities:
referential actions for foreign keys, index access methods, and the
commands a row-level security policy applies to. Each member knows how to
render its own SQL fragment and the structural rules PostgreSQL attaches
to it.

Key Components:
    - ForeignKeyAction: ON DELETE / ON UPDATE referential actions
    - IndexMethod: Index access methods (btree, hash, gin, gist, spgist, brin)
    - PolicyCommand: Commands covered by an RLS policy

Example:
    >>> ForeignKeyAction.parse("set_null").sql_clause
    'SET NULL'
    >>> IndexMethod.HASH.allows_include
    False
"""

from __future__ import annotations

from ddlforge.onto import BaseEnum


class ForeignKeyAction(BaseEnum):
    """Referential actions for foreign key constraints.

    NO_ACTION: Check deferred to end of statement (PostgreSQL default)
    RESTRICT: Reject the change while dependent rows exist
    CASCADE: Propagate the delete/update to dependent rows
    SET_NULL: Set the referencing column to NULL
    SET_DEFAULT: Set the referencing column to its default
    """

    NO_ACTION = "no-action"
    RESTRICT = "restrict"
    CASCADE = "cascade"
    SET_NULL = "set-null"
    SET_DEFAULT = "set-default"

    @property
    def sql_clause(self) -> str:
        return self.value.replace("-", " ").upper()

    @classmethod
    def parse(cls, action: str | ForeignKeyAction) -> ForeignKeyAction:
        """Parse an action from any of the usual spellings.

        Accepts enum values (``set-null``), SQL clauses (``SET NULL``) and
        identifier forms (``SET_NULL``, ``setnull``).

        Raises:
            ValueError: If the action is not recognized
        """
        if isinstance(action, ForeignKeyAction):
            return action
        normalized = action.strip().lower().replace("_", " ").replace("-", " ")
        compact = normalized.replace(" ", "")
        for member in cls:
            if compact == member.value.replace("-", ""):
                return member
        raise ValueError(
            f"Invalid foreign key action '{action}'. Valid values are: "
            "RESTRICT, CASCADE, SET NULL, SET DEFAULT, NO ACTION"
        )

    def is_valid_for_column(self, is_nullable: bool, has_default: bool) -> bool:
        """Check whether the referencing column can support this action."""
        if self is ForeignKeyAction.SET_NULL:
            return is_nullable
        if self is ForeignKeyAction.SET_DEFAULT:
            return has_default
        return True

    @property
    def requirements(self) -> list[str]:
        if self is ForeignKeyAction.SET_NULL:
            return ["Column must be nullable"]
        if self is ForeignKeyAction.SET_DEFAULT:
            return ["Column must have a default value"]
        return []


_SUPPORTED_OPERATORS: dict[str, tuple[str, ...]] = {
    "btree": ("=", "<", "<=", ">", ">=", "BETWEEN", "IN", "IS NULL"),
    "hash": ("=", "IN"),
    "gin": ("@>", "<@", "?", "?&", "?|", "@@", "@@@"),
    "gist": ("<<", "&<", "&>", ">>", "<->", "&&", "~="),
    "spgist": ("<<", "^@", "~=", "<->", "&<|", "|&>"),
    "brin": ("=", "<", "<=", ">", ">=", "BETWEEN"),
}

_STORAGE_PARAMETERS: dict[str, frozenset[str]] = {
    "btree": frozenset({"deduplicate_items"}),
    "hash": frozenset(),
    "gin": frozenset({"fastupdate", "gin_pending_list_limit"}),
    "gist": frozenset({"buffering"}),
    "spgist": frozenset(),
    "brin": frozenset({"pages_per_range", "autosummarize"}),
}

_QUERY_PATTERN_METHODS: dict[str, str] = {
    "equality": "hash",
    "exact": "hash",
    "range": "btree",
    "between": "btree",
    "comparison": "btree",
    "fulltext": "gin",
    "search": "gin",
    "containment": "gin",
    "array": "gin",
    "proximity": "gist",
    "nearest": "gist",
    "prefix": "spgist",
    "startswith": "spgist",
    "timeseries": "brin",
    "ordered": "brin",
}


class IndexMethod(BaseEnum):
    """PostgreSQL index access methods.

    BTREE: General purpose, ordering and range queries
    HASH: Equality lookups on a single column
    GIN: Inverted index for containment (jsonb, arrays, full text)
    GIST: Generalized search tree (geometric, ranges)
    SPGIST: Space-partitioned search tree (prefix matching, clustered data)
    BRIN: Block range summaries for naturally ordered large tables
    """

    BTREE = "btree"
    HASH = "hash"
    GIN = "gin"
    GIST = "gist"
    SPGIST = "spgist"
    BRIN = "brin"

    @classmethod
    def parse(cls, method: str | IndexMethod) -> IndexMethod:
        """Parse a method name, tolerating ``b-tree`` and ``sp-gist`` spellings."""
        if isinstance(method, IndexMethod):
            return method
        return cls(method.strip().lower().replace("-", ""))

    @property
    def supported_operators(self) -> tuple[str, ...]:
        return _SUPPORTED_OPERATORS[self.value]

    def supports_operators(self, operators: list[str]) -> bool:
        supported = self.supported_operators
        return all(op in supported for op in operators)

    @property
    def allows_multiple_columns(self) -> bool:
        return self is not IndexMethod.HASH

    @property
    def allows_ordering(self) -> bool:
        return self is not IndexMethod.HASH

    @property
    def allows_include(self) -> bool:
        return self is IndexMethod.BTREE

    @property
    def allows_unique(self) -> bool:
        return self is not IndexMethod.BRIN

    @property
    def allows_fill_factor(self) -> bool:
        return self in (IndexMethod.BTREE, IndexMethod.HASH)

    def allows_storage_parameter(self, parameter: str) -> bool:
        if parameter == "fillfactor":
            return True
        return parameter in _STORAGE_PARAMETERS[self.value]

    @classmethod
    def recommend(cls, sql_type: str, query_pattern: str = "") -> IndexMethod:
        """Suggest an index method for a column type and query pattern."""
        normalized_type = sql_type.upper()
        pattern = query_pattern.lower()
        if "JSONB" in normalized_type or "[]" in normalized_type:
            return cls.GIN
        if any(t in normalized_type for t in ("POINT", "POLYGON", "GEOMETRY")):
            return cls.GIST
        if normalized_type in ("INET", "CIDR"):
            return cls.SPGIST if "prefix" in pattern else cls.BTREE
        return cls(_QUERY_PATTERN_METHODS.get(pattern, "btree"))


class PolicyCommand(BaseEnum):
    """Commands a row-level security policy applies to."""

    ALL = "all"
    SELECT = "select"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @property
    def sql_command(self) -> str:
        return self.value.upper()

    @property
    def allows_check(self) -> bool:
        """WITH CHECK is only meaningful for commands that write rows."""
        return self in (PolicyCommand.ALL, PolicyCommand.INSERT, PolicyCommand.UPDATE)

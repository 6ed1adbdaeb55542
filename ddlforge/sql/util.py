"""SQL text helpers shared by the builders."""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Literal escaping
# ---------------------------------------------------------------------------


def escape_literal(value: str) -> str:
    """Escape text for embedding in a single-quoted SQL literal."""
    return value.replace("'", "''")


def quote_literal(value: str) -> str:
    """``'value'`` with embedded single quotes doubled."""
    return f"'{escape_literal(value)}'"


# ---------------------------------------------------------------------------
# DO blocks
# ---------------------------------------------------------------------------


def guarded_block(guards: list[tuple[str, str]]) -> str:
    """One anonymous ``DO $$ ... END $$;`` block of ``IF NOT EXISTS`` guards.

    Args:
        guards: Pairs of (existence query, statement run when the query finds nothing)

    Returns:
        str: The DO block
    """
    lines = ["DO $$", "BEGIN"]
    for query, statement in guards:
        lines.append(f"  IF NOT EXISTS ({query}) THEN")
        lines.append(f"    {statement}")
        lines.append("  END IF;")
    lines.append("END $$;")
    return "\n".join(lines)

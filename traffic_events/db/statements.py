"""Statement builder for positional ``?`` placeholders.

Statements are written once with ``?`` placeholders. Backends with real
parameter binding get them rewritten to SQLAlchemy named parameters
(``:p0``, ``:p1``, ...). Backends that only accept literal SQL text (rqlite)
get each parameter rendered as an escaped SQL literal.

Placeholders inside single-quoted string literals and double-quoted
identifiers are left alone. A mismatch between placeholder count and
parameter count is rejected before any text is produced.
"""

import math
from datetime import date, datetime
from typing import Any, Dict, List, Sequence, Tuple

from ..errors import StatementError

def placeholder_positions(sql: str) -> List[int]:
    """Return the offsets of every ``?`` placeholder outside quoted text."""
    positions = []
    quote = None
    for index, char in enumerate(sql):
        if quote:
            # A doubled quote inside a literal toggles out and straight back in
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == '?':
            positions.append(index)
    if quote:
        raise StatementError("Unterminated quoted text in statement")
    return positions

def _check_count(positions: List[int], params: Sequence[Any]) -> None:
    if len(positions) != len(params):
        raise StatementError(
            f"Statement has {len(positions)} placeholders but {len(params)} parameters were given"
        )

def _substitute(sql: str, positions: List[int], replacements: Sequence[str]) -> str:
    parts = []
    last = 0
    for position, replacement in zip(positions, replacements):
        parts.append(sql[last:position])
        parts.append(replacement)
        last = position + 1
    parts.append(sql[last:])
    return ''.join(parts)

def render_literal(value: Any) -> str:
    """Render a Python scalar as a SQLite-compatible SQL literal.

    Raises:
        StatementError: If the value has no safe literal form
    """
    if value is None:
        return 'NULL'
    if isinstance(value, bool):
        return '1' if value else '0'
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise StatementError(f"Cannot render non-finite number {value!r}")
        return repr(value)
    if isinstance(value, datetime):
        value = value.strftime('%Y-%m-%d %H:%M:%S')
    elif isinstance(value, date):
        value = value.isoformat()
    if isinstance(value, str):
        if '\x00' in value:
            raise StatementError("Cannot render text containing NUL characters")
        return "'" + value.replace("'", "''") + "'"
    raise StatementError(f"Unsupported parameter type: {type(value).__name__}")

def inline_parameters(sql: str, params: Sequence[Any] = ()) -> str:
    """Substitute every placeholder with the escaped literal of its parameter."""
    positions = placeholder_positions(sql)
    _check_count(positions, params)
    return _substitute(sql, positions, [render_literal(p) for p in params])

def to_named_parameters(sql: str, params: Sequence[Any] = ()) -> Tuple[str, Dict[str, Any]]:
    """Rewrite placeholders as ``:pN`` bind parameters for SQLAlchemy ``text()``."""
    positions = placeholder_positions(sql)
    _check_count(positions, params)
    names = [f'p{i}' for i in range(len(params))]
    named_sql = _substitute(sql, positions, [f':{name}' for name in names])
    return named_sql, dict(zip(names, params))

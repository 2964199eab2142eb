"""SQL dialect helpers for the event queries.

Each storage backend exposes one of these so the repository can write
statements that normalize timestamps on both sides of a comparison and
truncate them to minute precision for display.
"""

from dataclasses import dataclass

@dataclass(frozen=True)
class SqlDialect:
    """Dialect-specific SQL fragments."""

    name: str
    timestamp_template: str
    minute_template: str
    insert_returning: bool = False

    def timestamp(self, expr: str) -> str:
        """Wrap ``expr`` in the dialect's date-normalizing function."""
        return self.timestamp_template.format(expr)

    def minute(self, expr: str) -> str:
        """Format ``expr`` as ``YYYY-MM-DD HH:MM``."""
        return self.minute_template.format(expr)

SQLITE_DIALECT = SqlDialect(
    name='sqlite',
    timestamp_template='datetime({})',
    minute_template="strftime('%Y-%m-%d %H:%M', {})",
)

MYSQL_DIALECT = SqlDialect(
    name='mysql',
    timestamp_template='CAST({} AS DATETIME)',
    minute_template="DATE_FORMAT({}, '%Y-%m-%d %H:%i')",
)

POSTGRESQL_DIALECT = SqlDialect(
    name='postgresql',
    timestamp_template='CAST({} AS TIMESTAMP)',
    minute_template="to_char({}, 'YYYY-MM-DD HH24:MI')",
    insert_returning=True,
)

DIALECTS = {
    dialect.name: dialect
    for dialect in (SQLITE_DIALECT, MYSQL_DIALECT, POSTGRESQL_DIALECT)
}

def get_dialect(name: str) -> SqlDialect:
    """Look up the helpers for a SQLAlchemy dialect name."""
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(
            f"Unsupported SQL dialect '{name}'. Must be one of: {', '.join(DIALECTS)}"
        ) from None

"""
Forward-only schema migration

Tables are created when absent, then the live schema is compared against the
model metadata with alembic's autogenerate API. Only additive changes (new
columns, new indexes) are applied; anything else is logged and left alone.
There is no revision table and no downgrade path.
"""
from typing import List

from alembic.autogenerate import compare_metadata
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import MetaData, inspect
from sqlalchemy.engine import Connection
import logging

logger = logging.getLogger(__name__)

def _index_exists(connection: Connection, index) -> bool:
    inspector = inspect(connection)
    existing = inspector.get_indexes(index.table.name, schema=index.table.schema)
    return any(ix["name"] == index.name for ix in existing)

def auto_migrate(connection: Connection, metadata: MetaData) -> List[str]:
    """Create missing tables and add missing columns/indexes.

    Runs on a synchronous connection (use ``AsyncConnection.run_sync``).

    Returns:
        A description of every change applied beyond table creation.
    """
    metadata.create_all(connection)

    context = MigrationContext.configure(connection)
    operations = Operations(context)
    applied = []

    for diff in compare_metadata(context, metadata):
        # Column modifications come grouped in a list
        if isinstance(diff, list):
            for change in diff:
                logger.warning(f"Skipping schema change {change[0]} on {change[2]}.{change[3]}")
            continue

        kind = diff[0]
        if kind == "add_column":
            _, schema, table_name, column = diff
            operations.add_column(table_name, column, schema=schema)
            applied.append(f"add_column {table_name}.{column.name}")
            logger.info(f"Added column {table_name}.{column.name}")
        elif kind == "add_index":
            index = diff[1]
            # add_column may already have created the index of a new column
            if _index_exists(connection, index):
                continue
            operations.create_index(
                index.name,
                index.table.name,
                [column.name for column in index.columns],
                unique=bool(index.unique),
                schema=index.table.schema,
            )
            applied.append(f"add_index {index.name}")
            logger.info(f"Created index {index.name}")
        else:
            logger.warning(f"Skipping schema change {kind}")

    return applied

import pytest
from sqlalchemy import event, inspect

from app.db import database
from app.models import Base

pytestmark = pytest.mark.asyncio

async def test_init_db_only_creates_tables(tmp_path, monkeypatch):
    """Startup issues table DDL and nothing else."""
    engine = database.create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'startup.db'}",
        **database._engine_options("sqlite+aiosqlite://")
    )
    monkeypatch.setattr(database, "engine", engine)

    statements = []

    @event.listens_for(engine.sync_engine, "before_cursor_execute")
    def collect(conn, cursor, statement, parameters, context, executemany):
        statements.append(statement)

    try:
        await database.init_db()

        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())
    finally:
        await engine.dispose()

    assert set(tables) == set(Base.metadata.tables)
    assert not [s for s in statements if "EXTENSION" in s.upper()]

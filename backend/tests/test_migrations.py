"""
The league schema migration builds the same tables the models declare,
including the one-open-dispute-per-match partial index.
"""

import importlib.util
from pathlib import Path

import pytest
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError
from sqlmodel import SQLModel

VERSIONS_DIR = Path(__file__).resolve().parents[1] / "alembic" / "versions"


def load_migration(filename):
    spec = importlib.util.spec_from_file_location(filename[:-3], VERSIONS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def run(engine, step):
    with engine.begin() as conn:
        with Operations.context(MigrationContext.configure(conn)):
            step()


@pytest.fixture(name="migrated")
def migrated_fixture():
    engine = create_engine("sqlite:///:memory:")
    migration = load_migration("001_league_core_schema.py")
    run(engine, migration.upgrade)
    yield engine, migration
    engine.dispose()


def test_upgrade_creates_model_tables(migrated):
    engine, _ = migrated

    tables = set(inspect(engine).get_table_names())
    assert set(SQLModel.metadata.tables) <= tables


def test_upgrade_columns_match_models(migrated):
    engine, _ = migrated
    inspector = inspect(engine)

    for name, table in SQLModel.metadata.tables.items():
        migrated_columns = {c["name"] for c in inspector.get_columns(name)}
        assert migrated_columns == set(table.columns.keys()), name


def test_partial_unique_index_on_open_disputes(migrated):
    engine, _ = migrated
    insert = text(
        "INSERT INTO dispute (match_id, disputed_by, reason, status, created_at, updated_at) "
        "VALUES (1, 1, :reason, :status, '2026-01-01 00:00:00', '2026-01-01 00:00:00')"
    )

    with engine.begin() as conn:
        conn.execute(insert, {"reason": "closed", "status": "resolved"})
        conn.execute(insert, {"reason": "open", "status": "open"})

    with pytest.raises(IntegrityError):
        with engine.begin() as conn:
            conn.execute(insert, {"reason": "second open", "status": "open"})


def test_downgrade_drops_everything(migrated):
    engine, migration = migrated

    run(engine, migration.downgrade)

    assert inspect(engine).get_table_names() == []


def test_check_tables_reports_missing_and_complete(migrated, capsys):
    from check_migrations import REQUIRED_TABLES, check_tables

    engine, migration = migrated
    assert check_tables(engine) == []
    assert "All required tables exist!" in capsys.readouterr().out

    run(engine, migration.downgrade)
    assert check_tables(engine) == REQUIRED_TABLES


def test_fixture_slots_are_unique_per_season(migrated):
    engine, _ = migrated
    constraints = inspect(engine).get_unique_constraints("fixture")
    assert ["season_id", "round_index", "sequence_in_round"] in [c["column_names"] for c in constraints]

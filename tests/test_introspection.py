from unittest import mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError

from schema_doctor import introspection
from schema_doctor.config import ConfigurationError
from schema_doctor.introspection import UNSUPPORTED, Column, ForeignKey, Index, SchemaIntrospector


@pytest.fixture
def schema(db):
    db.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, email VARCHAR(255) NOT NULL, name TEXT DEFAULT 'anon')",
        "CREATE TABLE logs (message TEXT)",
        "CREATE TABLE memberships (user_id INTEGER, group_id INTEGER, PRIMARY KEY (user_id, group_id))",
        "CREATE TABLE comments (id INTEGER PRIMARY KEY, user_id BIGINT REFERENCES users (id))",
        "CREATE UNIQUE INDEX index_users_on_email ON users (email)",
        "CREATE VIEW active_users AS SELECT * FROM users",
    )
    return db.introspector()


def test_list_tables_is_sorted_and_excludes_views(schema):
    assert schema.list_tables() == ["comments", "logs", "memberships", "users"]


def test_list_views(schema):
    assert schema.supports_view_introspection
    assert schema.list_views() == ["active_users"]


def test_list_views_without_views_is_empty_not_unsupported(db):
    db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
    views = db.introspector().list_views()
    assert views == []
    assert views is not UNSUPPORTED


def test_list_views_unsupported_backend(db):
    with mock.patch.object(introspection, "VIEW_INTROSPECTION_DIALECTS", frozenset()):
        inspector = SchemaIntrospector(db.engine)
    assert not inspector.supports_view_introspection
    assert inspector.list_views() is UNSUPPORTED
    assert not UNSUPPORTED
    assert repr(UNSUPPORTED) == "UNSUPPORTED"


def test_table_exists(schema):
    assert schema.table_exists("users")
    assert not schema.table_exists("ghosts")
    assert not schema.table_exists("active_users")


def test_list_columns(schema):
    columns = schema.list_columns("users")
    assert [c.name for c in columns] == ["id", "email", "name"]
    assert columns[1] == Column(name="email", type="VARCHAR(255)", nullable=False, default=None)
    assert columns[2].default == "'anon'"


def test_list_columns_is_idempotent(schema):
    assert schema.list_columns("users") == schema.list_columns("users")


def test_missing_table_yields_empty_results(schema):
    assert schema.list_columns("ghosts") == []
    assert schema.list_indexes("ghosts") == []
    assert schema.list_foreign_keys("ghosts") == []
    assert schema.primary_key_column("ghosts") is None
    assert schema.find_column("ghosts", "id") is None


def test_list_indexes(schema):
    assert schema.list_indexes("users") == [
        Index(name="index_users_on_email", table="users", columns=("email",), unique=True, partial=False)
    ]


def test_list_foreign_keys(schema):
    assert schema.list_foreign_keys("comments") == [
        ForeignKey(name=None, table="comments", columns=("user_id",), referred_table="users", referred_columns=("id",))
    ]


def test_primary_key_column(schema):
    assert schema.primary_key_column("users").name == "id"
    assert schema.primary_key_column("logs") is None
    # Composite keys have no single primary key column.
    assert schema.primary_key_column("memberships") is None
    assert [c.name for c in schema.primary_key_columns("memberships")] == ["user_id", "group_id"]


def test_find_column(schema):
    assert schema.find_column("comments", "user_id").type == "BIGINT"
    assert schema.find_column("comments", "missing") is None


def test_queries_reflect_schema_changes(db):
    inspector = db.introspector()
    assert inspector.list_tables() == []
    db.execute("CREATE TABLE users (id INTEGER PRIMARY KEY)")
    assert inspector.list_tables() == ["users"]


def test_connection_errors_propagate(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'schema.db'}")
    with pytest.raises(OperationalError):
        SchemaIntrospector(engine).list_tables()


def test_connect_requires_a_url():
    with mock.patch.dict(introspection.CONFIG, {"DATABASE_URL": None}):
        with pytest.raises(ConfigurationError):
            introspection.connect()


def test_connect_builds_introspector(db):
    inspector = introspection.connect(db.url)
    assert inspector.dialect_name == "sqlite"
    assert inspector.schema is None


def test_partial_index_is_flagged(db):
    db.execute(
        "CREATE TABLE users (id INTEGER PRIMARY KEY, email TEXT, deleted_at TIMESTAMP)",
        "CREATE INDEX index_live_users_on_email ON users (email) WHERE deleted_at IS NULL",
    )
    assert db.introspector().list_indexes("users") == [
        Index(name="index_live_users_on_email", table="users", columns=("email",), unique=False, partial=True)
    ]


def test_view_capability_is_resolved_from_the_dialect(db):
    assert SchemaIntrospector(db.engine).supports_view_introspection is True
    bind = mock.MagicMock()
    bind.dialect.name = "firebird"
    assert SchemaIntrospector(bind).supports_view_introspection is False


def test_postgresql_views_include_materialized_views():
    bind = mock.MagicMock()
    bind.dialect.name = "postgresql"
    inspector = mock.MagicMock()
    inspector.get_view_names.return_value = ["recent_orders", "active_users"]
    inspector.get_materialized_view_names.return_value = ["daily_totals"]
    with mock.patch.object(introspection, "inspect", return_value=inspector) as inspect:
        views = SchemaIntrospector(bind, schema="public").list_views()
    assert views == ["active_users", "daily_totals", "recent_orders"]
    inspect.assert_called_once_with(bind)
    inspector.get_materialized_view_names.assert_called_once_with(schema="public")


def test_other_dialects_do_not_ask_for_materialized_views():
    bind = mock.MagicMock()
    bind.dialect.name = "mysql"
    inspector = mock.MagicMock()
    inspector.get_view_names.return_value = ["active_users"]
    with mock.patch.object(introspection, "inspect", return_value=inspector):
        assert SchemaIntrospector(bind).list_views() == ["active_users"]
    inspector.get_materialized_view_names.assert_not_called()

import sys
import types

import pytest
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from schema_doctor.config import ConfigurationError
from schema_doctor.models import ModelMapping, Relationship, load_snapshot, snapshot_from_registry, tables_of


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(255))


class Comment(Base):
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    user: Mapped[User] = relationship()


def test_snapshot_from_declarative_base():
    snapshot = snapshot_from_registry(Base)
    assert snapshot == (
        ModelMapping(
            name="Comment",
            table_name="comments",
            columns=("id", "user_id"),
            relationships=(
                Relationship(name="user", target_table="users", columns=("user_id",), referred_columns=("id",)),
            ),
        ),
        ModelMapping(name="User", table_name="users", columns=("id", "email"), relationships=()),
    )


def test_snapshot_from_registry_object():
    assert snapshot_from_registry(Base.registry) == snapshot_from_registry(Base)


def test_snapshot_rejects_other_objects():
    with pytest.raises(ConfigurationError):
        snapshot_from_registry(object())


def test_load_snapshot(monkeypatch):
    module = types.ModuleType("fake_app_models")
    module.Base = Base
    monkeypatch.setitem(sys.modules, "fake_app_models", module)
    assert load_snapshot("fake_app_models:Base") == snapshot_from_registry(Base)


@pytest.mark.parametrize("target", ["fake_app_models", "fake_app_models:Missing"])
def test_load_snapshot_errors(monkeypatch, target):
    monkeypatch.setitem(sys.modules, "fake_app_models", types.ModuleType("fake_app_models"))
    with pytest.raises(ConfigurationError):
        load_snapshot(target)


def test_load_snapshot_missing_module():
    with pytest.raises(ConfigurationError) as exc_info:
        load_snapshot("no_such_app_models_xyz:Base")
    assert "no_such_app_models_xyz" in str(exc_info.value)


def test_tables_of():
    models = [ModelMapping("B", "b"), ModelMapping("A", "a"), ModelMapping("A2", "a")]
    assert tables_of(models) == ["a", "b"]

import io
from typing import Optional, Sequence

import pytest
from sqlalchemy import create_engine

from schema_doctor.introspection import SchemaIntrospector
from schema_doctor.models import ModelMapping
from schema_doctor.printers import IOPrinter


class Database:
    """Throwaway SQLite database plus helpers mirroring a detector run."""

    def __init__(self, url: str) -> None:
        self.url = url
        self.engine = create_engine(url, future=True)

    def execute(self, *statements: str) -> None:
        with self.engine.begin() as conn:
            for statement in statements:
                conn.exec_driver_sql(statement)

    def introspector(self) -> SchemaIntrospector:
        return SchemaIntrospector(self.engine)

    def run_detector(
        self,
        detector_class,
        config: Optional[dict] = None,
        models: Sequence[ModelMapping] = (),
        global_config: Optional[dict] = None,
        introspector: Optional[SchemaIntrospector] = None,
    ):
        output = io.StringIO()
        success = detector_class.run(
            introspector or self.introspector(),
            config=config,
            printer=IOPrinter(output),
            models=models,
            global_config=global_config,
        )
        return success, output.getvalue()


@pytest.fixture
def db(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'schema.db'}")
    yield database
    database.engine.dispose()
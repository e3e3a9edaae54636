"""Create the registration tables and optionally seed a form schema."""

import argparse
import json
import logging
from pathlib import Path

from sqlalchemy import select

from registration_gate.core.settings import settings
from registration_gate.db.session import SessionLocal, create_tables
from registration_gate.models import FormSchema
from registration_gate.schemas.form import FieldDescriptor

logger = logging.getLogger(__name__)


def seed_form_schema(path: Path) -> int:
    """Load field descriptors from a JSON file into the configured schema row."""
    raw_fields = json.loads(path.read_text(encoding="utf-8"))
    fields = [FieldDescriptor.model_validate(item).model_dump() for item in raw_fields]
    with SessionLocal() as db:
        schema = db.scalars(
            select(FormSchema).where(FormSchema.schema_identifier == settings.form_schema_identifier)
        ).first()
        if schema is None:
            schema = FormSchema(schema_identifier=settings.form_schema_identifier)
            db.add(schema)
        schema.fields = fields
        db.commit()
    return len(fields)


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--schema", type=Path, help="JSON file with form field descriptors")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    create_tables()
    logger.info("Database initialized at %s", settings.effective_database_url)
    if args.schema is not None:
        count = seed_form_schema(args.schema)
        logger.info("Seeded %d form fields into schema %r", count, settings.form_schema_identifier)


if __name__ == "__main__":
    main()

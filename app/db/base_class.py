# File: app/db/base_class.py | Version: 2.0 | Path: /app/db/base_class.py
from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Index names line up with the ones alembic's op.f() renders in migrations
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


# Single, authoritative Base for all models
class Base(DeclarativeBase):
    metadata = MetaData(naming_convention=NAMING_CONVENTION)

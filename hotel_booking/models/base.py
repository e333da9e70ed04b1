from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    All models in this application inherit from this base class so that the
    Alembic environment and the test fixtures can create every table from a
    single metadata object.
    """

    pass

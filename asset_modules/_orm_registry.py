"""
Module ORM Registry (``asset_modules._orm_registry``).

Responsibility
--------------
Ensure all module-level SQLAlchemy ORM models are imported so that
``Base.metadata`` contains their table definitions before tables are
created, and provide ``create_all_tables()`` -- the entry point scripts and
``tests/conftest.py`` use to get a complete schema.

Architecture position
---------------------
**Modules layer** -- utility.  Imports ``asset_modules.*.orm`` and
``asset_kernel.db.engine`` (allowed: modules -> kernel).  MUST NOT be
imported by ``asset_kernel``.
"""


def import_all_orm_models() -> None:
    """Import every ``asset_modules.*.orm`` module (idempotent)."""
    import asset_modules.assets.orm  # noqa: F401


def create_all_tables() -> None:
    """Register all module ORM models, then create every table."""
    from asset_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()

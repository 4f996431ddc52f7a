# bloomhub/repositories/upsert.py
from sqlalchemy.dialects import postgresql, sqlite
from sqlmodel import Session


def dialect_insert(session: Session, model):
    """
    Return an INSERT construct that supports ON CONFLICT for the bound backend.

    Postgres is the production database, SQLite is used by tests. Both
    expose `on_conflict_do_nothing` / `on_conflict_do_update`.
    """
    name = session.get_bind().dialect.name
    if name == "postgresql":
        return postgresql.insert(model)
    if name == "sqlite":
        return sqlite.insert(model)
    raise RuntimeError(f"Unsupported database dialect for upsert: {name}")

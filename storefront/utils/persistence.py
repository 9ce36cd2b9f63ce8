"""
Single-statement write primitives.

Both helpers issue one UPDATE and leave commit/rollback to the caller,
so they can be combined with other writes inside one transaction.
"""
from typing import Any, Type
from sqlalchemy.orm import Session

from storefront.core.database import Base


def atomic_increment(db: Session, model: Type[Base], row_id: Any, field: str, delta: int) -> bool:
    """
    UPDATE <table> SET <field> = <field> + delta WHERE id = row_id

    Returns:
        True if the row exists and was updated
    """
    column = getattr(model, field)
    updated = db.query(model).filter(model.id == row_id).update(
        {column: column + delta},
        synchronize_session=False
    )
    return updated == 1


def compare_and_set(db: Session, model: Type[Base], row_id: Any, field: str, expected: Any, new: Any) -> bool:
    """
    UPDATE <table> SET <field> = new WHERE id = row_id AND <field> = expected

    Returns:
        True if exactly one row was changed, i.e. this caller won the race
    """
    column = getattr(model, field)
    updated = db.query(model).filter(
        model.id == row_id,
        column == expected
    ).update(
        {column: new},
        synchronize_session=False
    )
    return updated == 1

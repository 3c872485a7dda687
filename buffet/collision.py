"""
Storage-side guard for the no-overlap rule.

Every write that can change a stack footprint goes through ``write_stack``.
On PostgreSQL the ``stack_no_overlap`` exclusion constraint rejects the
write; elsewhere the guard re-reads the shelf inside the same write-locked
transaction and refuses overlapping footprints before flushing. Either way
callers only ever see ``CollisionError`` and never driver exceptions.
"""

from typing import Optional

from psycopg2 import errors as pg_errors
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from buffet import crud, models
from buffet.errors import CollisionError
from buffet.logger import logger
from buffet.model.geometry import Rect, overlaps

SQLSTATE_EXCLUSION_VIOLATION = "23P01"


def has_native_exclusion(db: Session) -> bool:
    return db.get_bind().dialect.name == "postgresql"


def is_collision_violation(exc: Optional[BaseException]) -> bool:
    """Walk the driver error chain looking for an exclusion violation."""
    seen = set()
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, pg_errors.ExclusionViolation):
            return True
        if getattr(exc, "pgcode", None) == SQLSTATE_EXCLUSION_VIOLATION:
            return True
        exc = getattr(exc, "orig", None) or exc.__cause__ or exc.__context__
    return False


def find_overlapping(db: Session, stack: models.Stack) -> Optional[Rect]:
    footprint = Rect(stack.x, stack.y, stack.width, stack.height)
    for other in crud.read_footprints(db, stack.shelf_id, exclude_stack_id=stack.id):
        if overlaps(footprint, other):
            return other
    return None


def _ensure_footprint_free(db: Session, stack: models.Stack) -> None:
    other = find_overlapping(db, stack)
    if other is not None:
        raise CollisionError(
            f"Stack at ({stack.x}, {stack.y}) on shelf {stack.shelf_id} "
            f"collides with footprint at ({other.left}, {other.bottom})"
        )


def write_stack(db: Session, stack: models.Stack) -> models.Stack:
    """
    Persist a new or changed stack inside a savepoint.

    A rejected write rolls back only the savepoint, so a pending stack is
    expunged from the session and the surrounding transaction stays usable.
    """
    try:
        with db.begin_nested():
            if not has_native_exclusion(db):
                _ensure_footprint_free(db, stack)
            db.add(stack)
            db.flush()
    except IntegrityError as exc:
        if is_collision_violation(exc):
            logger.warning(
                f"Exclusion violation for stack on shelf {stack.shelf_id} "
                f"at ({stack.x}, {stack.y})"
            )
            raise CollisionError("Stack collides with existing items.") from exc
        raise
    return stack

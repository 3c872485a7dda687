"""
Placement and stack operations.

Each public function is one unit of work: it resolves ids, applies the
change and commits, or rolls everything back and re-raises. Only automatic
placement retries, and only once, after losing a write race; an explicit
coordinate from the caller is never second-guessed.
"""

from typing import Optional

from sqlalchemy.orm import Session

from buffet import crud, models, stack_engine
from buffet.collision import write_stack
from buffet.database import transaction
from buffet.errors import CollisionError, NoSpaceError, ValidationError
from buffet.logger import logger

PLACEMENT_ATTEMPTS = 2


def _place_at(
    db: Session, shelf: models.Shelf, dish: models.Dish, x: int
) -> models.Stack:
    stack = crud.new_stack(shelf, dish, x, 0)
    try:
        return write_stack(db, stack)
    except CollisionError:
        if stack in db:
            db.expunge(stack)
        raise


def _place_at_requested_x(
    db: Session, shelf: models.Shelf, dish: models.Dish, x: int, max_x: int
) -> models.Stack:
    clamped_x = max(0, min(x, max_x))
    try:
        return _place_at(db, shelf, dish, clamped_x)
    except CollisionError:
        logger.info(
            f"Dish {dish.id} does not fit at x={clamped_x} on shelf {shelf.id}"
        )
        raise NoSpaceError()


def _place_at_free_spot(
    db: Session, shelf: models.Shelf, dish: models.Dish, max_x: int
) -> models.Stack:
    for attempt in range(1, PLACEMENT_ATTEMPTS + 1):
        coords = crud.find_first_free_spot(
            db, shelf.id, max_x, 0, dish.width, dish.height
        )
        if coords is None:
            raise NoSpaceError()

        try:
            return _place_at(db, shelf, dish, coords[0])
        except CollisionError:
            logger.warning(
                f"Lost race for x={coords[0]} on shelf {shelf.id} "
                f"(attempt {attempt}/{PLACEMENT_ATTEMPTS})"
            )

    raise NoSpaceError()


def place_on_shelf(
    db: Session, shelf_id: int, dish_id: int, x: Optional[int] = None
) -> models.Stack:
    with transaction(db):
        shelf = crud.get_shelf(db, shelf_id)
        dish = crud.get_dish(db, dish_id)

        if dish.stack_limit > 1:
            target = crud.find_stack_target_for_dish_on_shelf(db, shelf.id, dish.id)
            if target is not None:
                return stack_engine.add_one(db, shelf, dish, target)

        max_x = shelf.width - dish.width
        if max_x < 0:
            raise NoSpaceError()

        if x is not None:
            stack = _place_at_requested_x(db, shelf, dish, x, max_x)
        else:
            stack = _place_at_free_spot(db, shelf, dish, max_x)

        logger.info(
            f"Placed dish {dish.id} on shelf {shelf.id} at ({stack.x}, {stack.y})"
        )
        return stack


def place_on_shelf_stacked(
    db: Session, shelf_id: int, dish_id: int, target_stack_id: int
) -> models.Stack:
    with transaction(db):
        shelf = crud.get_shelf(db, shelf_id)
        dish = crud.get_dish(db, dish_id)
        target = crud.get_stack(db, target_stack_id)
        return stack_engine.add_one(db, shelf, dish, target)


def merge_stacks(
    db: Session, source_stack_id: int, target_stack_id: int
) -> stack_engine.MergeResult:
    with transaction(db):
        source = crud.get_stack(db, source_stack_id)
        target = crud.get_stack(db, target_stack_id)
        return stack_engine.merge(db, source, target)


def unstack_one(db: Session, stack_id: int) -> stack_engine.UnstackResult:
    with transaction(db):
        stack = crud.get_stack(db, stack_id)
        result = stack_engine.unstack_one(db, stack)
        logger.info(
            f"Unstacked one from stack {stack_id}: "
            f"{'deleted' if result.deleted else result.remaining_count}"
        )
        return result


def move_stack(
    db: Session, stack_id: int, shelf_id: int, x: int, y: int
) -> models.Stack:
    with transaction(db):
        stack = crud.get_stack(db, stack_id)
        shelf = crud.get_shelf(db, shelf_id)

        if x < 0 or y < 0 or x + stack.width > shelf.width:
            raise ValidationError("Target position is outside the shelf.")

        stack.shelf_id = shelf.id
        stack.x = x
        stack.y = y
        write_stack(db, stack)
        logger.info(f"Moved stack {stack.id} to shelf {shelf.id} at ({x}, {y})")
        return stack


def delete_stack(db: Session, stack_id: int) -> bool:
    """Remove a stack; returns False when it was already gone."""
    with transaction(db):
        stack = crud.find_stack(db, stack_id)
        if stack is None:
            return False
        crud.delete_stack(db, stack)
        logger.info(f"Deleted stack {stack_id}")
        return True

"""
Counting rules for stacks.

A stack is one footprint holding ``count`` identical dishes, with
``1 <= count <= dish.stack_limit``. Adding past the limit is rejected
without touching the stack, and taking the last dish off deletes it.
None of these operations changes a footprint.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from buffet import crud, models
from buffet.collision import write_stack
from buffet.errors import CapacityError, ValidationError
from buffet.logger import logger


@dataclass(frozen=True)
class MergeResult:
    moved_count: int
    source_remaining: int
    target: models.Stack
    source: Optional[models.Stack]


@dataclass(frozen=True)
class UnstackResult:
    stack_id: int
    remaining_count: int
    deleted: bool


def assert_stackable(shelf: models.Shelf, dish: models.Dish, target: models.Stack) -> None:
    if dish.stack_limit <= 1:
        raise ValidationError("Dish is not stackable.")

    if target.shelf_id != shelf.id:
        raise ValidationError("Target shelf mismatch.")

    if target.dish.type != dish.type:
        raise ValidationError("Dish types do not match.")


def add_one(
    db: Session, shelf: models.Shelf, dish: models.Dish, target: models.Stack
) -> models.Stack:
    assert_stackable(shelf, dish, target)

    # a stack never holds more than either dish allows
    limit = min(dish.stack_limit, target.dish.stack_limit)
    next_count = target.count + 1
    if next_count > limit:
        raise CapacityError(f"Stack is full ({target.count}/{limit}).")

    target.count = next_count
    write_stack(db, target)
    logger.info(f"Stack {target.id} on shelf {shelf.id} now holds {target.count}")
    return target


def merge(db: Session, source: models.Stack, target: models.Stack) -> MergeResult:
    if source.id == target.id:
        raise ValidationError("Source and target must differ.")

    if source.dish.type != target.dish.type:
        raise ValidationError("Dish types do not match.")

    limit = target.dish.stack_limit
    if limit <= 1:
        raise ValidationError("Target dish is not stackable.")

    available = max(0, limit - target.count)
    moved_count = min(available, source.count)

    if moved_count == 0:
        return MergeResult(0, source.count, target, source)

    target.count += moved_count
    source_remaining = source.count - moved_count
    write_stack(db, target)

    if source_remaining <= 0:
        crud.delete_stack(db, source)
        logger.info(
            f"Merged {moved_count} from stack {source.id} into {target.id}; source emptied"
        )
        return MergeResult(moved_count, 0, target, None)

    source.count = source_remaining
    write_stack(db, source)
    logger.info(
        f"Merged {moved_count} from stack {source.id} into {target.id}; "
        f"{source_remaining} left on source"
    )
    return MergeResult(moved_count, source_remaining, target, source)


def unstack_one(db: Session, stack: models.Stack) -> UnstackResult:
    stack_id = stack.id
    if stack.count <= 1:
        crud.delete_stack(db, stack)
        return UnstackResult(stack_id, 0, True)

    stack.count -= 1
    write_stack(db, stack)
    return UnstackResult(stack_id, stack.count, False)

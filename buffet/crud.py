from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from buffet import errors, models, schemas
from buffet.model.geometry import Rect, first_free_origin


# ----Shelf-----
def read_shelves(db: Session, skip=0, limit: int = None) -> list[models.Shelf]:
    return db.scalars(
        select(models.Shelf).order_by(models.Shelf.id.asc()).offset(skip).limit(limit)
    ).all()


def get_shelf(db: Session, shelf_id: int) -> models.Shelf:
    shelf = db.get(models.Shelf, shelf_id)
    if shelf is None:
        raise errors.NotFoundError("Shelf", shelf_id)
    return shelf


def insert_shelf(db: Session, shelf: schemas.ShelfCreate) -> models.Shelf:
    new_shelf = models.Shelf(**shelf.model_dump(exclude={"id"}))
    db.add(new_shelf)
    return new_shelf


# ----Dish-----
def read_dishes(db: Session, skip=0, limit: int = None) -> list[models.Dish]:
    return db.scalars(
        select(models.Dish).order_by(models.Dish.id.asc()).offset(skip).limit(limit)
    ).all()


def get_dish(db: Session, dish_id: int) -> models.Dish:
    dish = db.get(models.Dish, dish_id)
    if dish is None:
        raise errors.NotFoundError("Dish", dish_id)
    return dish


def insert_dish(db: Session, dish: schemas.DishCreate) -> models.Dish:
    new_dish = models.Dish(**dish.model_dump(exclude={"id"}))
    db.add(new_dish)
    return new_dish


# ----Stack-----
def get_stack(db: Session, stack_id: int) -> models.Stack:
    stack = db.get(models.Stack, stack_id)
    if stack is None:
        raise errors.NotFoundError("Stack", stack_id)
    return stack


def find_stack(db: Session, stack_id: int) -> Optional[models.Stack]:
    return db.get(models.Stack, stack_id)


def read_stacks_by_shelf(db: Session, shelf_id: int) -> list[models.Stack]:
    return db.scalars(
        select(models.Stack)
        .filter(models.Stack.shelf_id == shelf_id)
        .order_by(models.Stack.id.asc())
    ).all()


def read_footprints(
    db: Session, shelf_id: int, exclude_stack_id: Optional[int] = None
) -> list[Rect]:
    query = select(
        models.Stack.x, models.Stack.y, models.Stack.width, models.Stack.height
    ).filter(models.Stack.shelf_id == shelf_id)
    if exclude_stack_id is not None:
        query = query.filter(models.Stack.id != exclude_stack_id)
    return [Rect(x, y, width, height) for x, y, width, height in db.execute(query)]


def find_first_free_spot(
    db: Session, shelf_id: int, max_x: int, max_y: int, width: int, height: int
) -> Optional[tuple[int, int]]:
    """
    First (x, y) on the shelf, scanning rows bottom-up and each row left to
    right, where a width x height footprint overlaps no existing stack.
    """
    if max_x < 0 or max_y < 0:
        return None
    return first_free_origin(read_footprints(db, shelf_id), max_x, max_y, width, height)


def find_stack_target_for_dish_on_shelf(
    db: Session, shelf_id: int, dish_id: int
) -> Optional[models.Stack]:
    """Most recently created stack of this dish on the shelf that still has room."""
    return db.scalars(
        select(models.Stack)
        .join(models.Dish, models.Stack.dish_id == models.Dish.id)
        .filter(
            models.Stack.shelf_id == shelf_id,
            models.Stack.dish_id == dish_id,
            models.Stack.count < models.Dish.stack_limit,
        )
        .order_by(models.Stack.id.desc())
        .limit(1)
    ).first()


def new_stack(shelf: models.Shelf, dish: models.Dish, x: int, y: int) -> models.Stack:
    return models.Stack(
        shelf_id=shelf.id,
        dish_id=dish.id,
        x=x,
        y=y,
        width=dish.width,
        height=dish.height,
        count=1,
    )


def delete_stack(db: Session, stack: models.Stack) -> None:
    db.delete(stack)
    db.flush()

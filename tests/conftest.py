import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_CONNECT_RETRIES", "1")

import pytest

from buffet import models
from buffet.database import SessionLocal, engine


@pytest.fixture
def db():
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        models.Base.metadata.drop_all(bind=engine)


@pytest.fixture
def make_shelf(db):
    def _make_shelf(width=100, height=50, name="Shelf"):
        shelf = models.Shelf(name=name, width=width, height=height)
        db.add(shelf)
        db.commit()
        return shelf

    return _make_shelf


@pytest.fixture
def make_dish(db):
    def _make_dish(width=40, height=40, stack_limit=1, type="bowl", name=None):
        dish = models.Dish(
            name=name or type.capitalize(),
            type=type,
            image=f"images/{type}.png",
            width=width,
            height=height,
            stack_limit=stack_limit,
        )
        db.add(dish)
        db.commit()
        return dish

    return _make_dish


@pytest.fixture
def make_stack(db):
    def _make_stack(shelf, dish, x=0, y=0, count=1):
        stack = models.Stack(
            shelf_id=shelf.id,
            dish_id=dish.id,
            x=x,
            y=y,
            width=dish.width,
            height=dish.height,
            count=count,
        )
        db.add(stack)
        db.commit()
        return stack

    return _make_stack

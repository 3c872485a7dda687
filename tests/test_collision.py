import pytest
from sqlalchemy.exc import IntegrityError

from buffet import collision, crud, models
from buffet.errors import CollisionError


class FakeDriverError(Exception):
    def __init__(self, pgcode):
        super().__init__(f"driver error {pgcode}")
        self.pgcode = pgcode


def _integrity_error(pgcode):
    return IntegrityError("INSERT INTO stack ...", {}, FakeDriverError(pgcode))


def test_exclusion_violation_is_classified_as_collision():
    assert collision.is_collision_violation(_integrity_error("23P01"))


def test_other_integrity_errors_are_not_collisions():
    assert not collision.is_collision_violation(_integrity_error("23505"))
    assert not collision.is_collision_violation(ValueError("boom"))
    assert not collision.is_collision_violation(None)


def test_wrapped_exclusion_violation_is_found():
    try:
        try:
            raise _integrity_error("23P01")
        except IntegrityError as inner:
            raise RuntimeError("flush failed") from inner
    except RuntimeError as outer:
        assert collision.is_collision_violation(outer)


def test_overlapping_write_is_rejected(db, make_shelf, make_dish, make_stack):
    shelf = make_shelf()
    dish = make_dish()
    make_stack(shelf, dish, x=0)

    stack = crud.new_stack(shelf, dish, 20, 0)
    with pytest.raises(CollisionError):
        collision.write_stack(db, stack)

    assert stack not in db
    assert len(crud.read_stacks_by_shelf(db, shelf.id)) == 1


def test_flush_placement_is_accepted(db, make_shelf, make_dish, make_stack):
    shelf = make_shelf()
    dish = make_dish()
    make_stack(shelf, dish, x=0)

    stack = collision.write_stack(db, crud.new_stack(shelf, dish, 40, 0))
    db.commit()

    assert stack.id is not None
    assert [s.x for s in crud.read_stacks_by_shelf(db, shelf.id)] == [0, 40]


def test_same_footprint_on_another_shelf_is_accepted(db, make_shelf, make_dish, make_stack):
    first = make_shelf(name="Top")
    second = make_shelf(name="Bottom")
    dish = make_dish()
    make_stack(first, dish, x=0)

    stack = collision.write_stack(db, crud.new_stack(second, dish, 0, 0))
    db.commit()

    assert stack.shelf_id == second.id


def test_failed_write_leaves_transaction_usable(db, make_shelf, make_dish, make_stack):
    shelf = make_shelf()
    dish = make_dish()
    make_stack(shelf, dish, x=0)

    with pytest.raises(CollisionError):
        collision.write_stack(db, crud.new_stack(shelf, dish, 10, 0))
    collision.write_stack(db, crud.new_stack(shelf, dish, 50, 0))
    db.commit()

    assert [s.x for s in crud.read_stacks_by_shelf(db, shelf.id)] == [0, 50]


def test_native_exclusion_violation_becomes_collision(
    db, make_shelf, make_dish, monkeypatch
):
    shelf = make_shelf()
    dish = make_dish()
    monkeypatch.setattr(collision, "has_native_exclusion", lambda session: True)

    def failing_flush(*args, **kwargs):
        raise _integrity_error("23P01")

    monkeypatch.setattr(db, "flush", failing_flush)

    with pytest.raises(CollisionError):
        collision.write_stack(db, crud.new_stack(shelf, dish, 0, 0))


def test_other_storage_failures_propagate(db, make_shelf, make_dish, monkeypatch):
    shelf = make_shelf()
    dish = make_dish()
    monkeypatch.setattr(collision, "has_native_exclusion", lambda session: True)

    def failing_flush(*args, **kwargs):
        raise _integrity_error("23505")

    monkeypatch.setattr(db, "flush", failing_flush)

    with pytest.raises(IntegrityError):
        collision.write_stack(db, crud.new_stack(shelf, dish, 0, 0))


def test_stack_model_rejects_zero_count(db, make_shelf, make_dish):
    shelf = make_shelf()
    dish = make_dish()
    db.add(
        models.Stack(
            shelf_id=shelf.id, dish_id=dish.id, x=0, y=0, width=40, height=40, count=0
        )
    )
    with pytest.raises(IntegrityError):
        db.flush()

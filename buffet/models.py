from datetime import datetime
from typing import Optional
from sqlalchemy import (
    DDL,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    event,
)
from sqlalchemy.orm import DeclarativeBase, relationship, Mapped, mapped_column
from sqlalchemy.sql import func


class Base(DeclarativeBase):
    pass


class Shelf(Base):
    __tablename__ = "shelf"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    width: Mapped[int]
    height: Mapped[int]
    # absolute position on the buffet page, layout only
    x: Mapped[Optional[int]]
    y: Mapped[Optional[int]]


class Dish(Base):
    __tablename__ = "dish"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255))
    type: Mapped[str] = mapped_column(String(64))
    image: Mapped[str] = mapped_column(String(255))
    width: Mapped[int]
    height: Mapped[int]
    stack_limit: Mapped[int] = mapped_column(default=1, server_default="1")


class Stack(Base):
    __tablename__ = "stack"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    shelf_id: Mapped[int] = mapped_column(
        ForeignKey("shelf.id", ondelete="CASCADE")
    )
    dish_id: Mapped[int] = mapped_column(ForeignKey("dish.id", ondelete="CASCADE"))
    x: Mapped[int]
    y: Mapped[int]
    width: Mapped[int]
    height: Mapped[int]
    count: Mapped[int] = mapped_column(default=1, server_default="1")
    created_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )

    shelf: Mapped[Shelf] = relationship("Shelf", lazy="joined")
    dish: Mapped[Dish] = relationship("Dish", lazy="joined")

    __table_args__ = (
        CheckConstraint("count >= 1", name="ck_stack_count_positive"),
        Index("idx_stack_shelf", "shelf_id"),
        Index("idx_stack_dish", "dish_id"),
    )


# Half-open int4range bounds let footprints touch without overlapping.
event.listen(
    Stack.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(
        dialect="postgresql"
    ),
)
event.listen(
    Stack.__table__,
    "after_create",
    DDL(
        "ALTER TABLE stack ADD CONSTRAINT stack_no_overlap "
        "EXCLUDE USING gist ("
        "shelf_id WITH =, "
        "int4range(x, x + width) WITH &&, "
        "int4range(y, y + height) WITH &&)"
    ).execute_if(dialect="postgresql"),
)

from pydantic import BaseModel, Field, AliasChoices
from typing import Optional


def to_camel(string: str) -> str:
    """Helper function to convert snake_case to camelCase"""
    parts = string.split("_")
    return parts[0] + "".join(word.capitalize() for word in parts[1:])


class CamelModel(BaseModel):
    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel


class uploadResponse(BaseModel):
    message: str


# ----Shelf-----
class ShelfBase(CamelModel):
    id: int
    name: str
    width: int
    height: int
    x: Optional[int] = None
    y: Optional[int] = None


class ShelfCreate(BaseModel):
    id: Optional[int] = None
    name: str = Field(validation_alias=AliasChoices("name", "Name", "Shelf Name"))
    width: int = Field(validation_alias=AliasChoices("width", "Width"))
    height: int = Field(validation_alias=AliasChoices("height", "Height"))
    x: Optional[int] = Field(default=None, validation_alias=AliasChoices("x", "X"))
    y: Optional[int] = Field(default=None, validation_alias=AliasChoices("y", "Y"))

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


# ----Dish-----
class DishBase(CamelModel):
    id: int
    name: str
    type: str
    image: str
    width: int
    height: int
    stack_limit: int


class DishCreate(BaseModel):
    id: Optional[int] = None
    name: str = Field(validation_alias=AliasChoices("name", "Name", "Dish Name"))
    type: str = Field(validation_alias=AliasChoices("type", "Type"))
    image: str = Field(validation_alias=AliasChoices("image", "Image"))
    width: int = Field(gt=0, validation_alias=AliasChoices("width", "Width"))
    height: int = Field(gt=0, validation_alias=AliasChoices("height", "Height"))
    stack_limit: int = Field(
        default=1, ge=1, validation_alias=AliasChoices("stack_limit", "Stack Limit")
    )

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


# ----Stack-----
class StackBase(CamelModel):
    id: int
    shelf_id: int
    dish_id: int
    x: int
    y: int
    width: int
    height: int
    count: int


class StackWithDish(CamelModel):
    id: int
    x: int
    y: int
    width: int
    height: int
    count: int
    dish: DishBase


class ShelfDetail(CamelModel):
    shelf: ShelfBase
    stacks: list[StackWithDish]


class PlaceRequest(CamelModel):
    dish_id: int
    x: Optional[int] = None


class PlaceStackedRequest(CamelModel):
    dish_id: int
    target_stack_id: int


class MergeRequest(CamelModel):
    source_stack_id: int
    target_stack_id: int


class MergeResponse(CamelModel):
    target_id: int
    target_count: int
    source_id: Optional[int] = None
    source_remaining_count: int
    moved_count: int


class UnstackRequest(CamelModel):
    stack_id: int


class UnstackResponse(CamelModel):
    stack_id: int
    remaining_count: int
    deleted: bool


class MoveRequest(CamelModel):
    shelf_id: int
    x: int
    y: int


class MoveResponse(CamelModel):
    id: int
    shelf_id: int
    x: int
    y: int

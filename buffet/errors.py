class PlacementError(Exception):
    """Base class for every failure the placement core reports to callers."""


class NotFoundError(PlacementError):
    def __init__(self, entity: str, entity_id: int):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class ValidationError(PlacementError):
    pass


class CollisionError(PlacementError):
    """A write would make two footprints on one shelf overlap."""


class CapacityError(PlacementError):
    pass


class NoSpaceError(PlacementError):
    def __init__(self, message: str = "No space available"):
        super().__init__(message)

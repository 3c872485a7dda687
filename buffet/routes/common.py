from fastapi import HTTPException

from buffet import errors


def to_http_exception(e: errors.PlacementError) -> HTTPException:
    if isinstance(e, errors.NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, errors.ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, errors.CollisionError):
        return HTTPException(status_code=409, detail="Collision detected")
    if isinstance(e, errors.NoSpaceError):
        return HTTPException(status_code=409, detail="No space available")
    if isinstance(e, errors.CapacityError):
        return HTTPException(status_code=409, detail=f"Stack is full: {e}")
    return HTTPException(status_code=500, detail=str(e))

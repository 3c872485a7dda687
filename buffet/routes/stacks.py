from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from ..database import get_db
from .. import errors, schemas, services
from ..logger import logger
from .common import to_http_exception

router = APIRouter(tags=["Stacks"])


@router.post("/merge", response_model=schemas.MergeResponse)
def merge_stacks(payload: schemas.MergeRequest, db: Session = Depends(get_db)):
    try:
        result = services.merge_stacks(
            db, payload.source_stack_id, payload.target_stack_id
        )
        return schemas.MergeResponse(
            target_id=result.target.id,
            target_count=result.target.count,
            source_id=result.source.id if result.source is not None else None,
            source_remaining_count=result.source_remaining,
            moved_count=result.moved_count,
        )
    except errors.PlacementError as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            f"Error merging stack {payload.source_stack_id} into {payload.target_stack_id}"
        )
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@router.post("/unstack", response_model=schemas.UnstackResponse)
def unstack_one(payload: schemas.UnstackRequest, db: Session = Depends(get_db)):
    try:
        result = services.unstack_one(db, payload.stack_id)
        return schemas.UnstackResponse(
            stack_id=result.stack_id,
            remaining_count=result.remaining_count,
            deleted=result.deleted,
        )
    except errors.PlacementError as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.exception(f"Error unstacking stack {payload.stack_id}")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@router.patch("/{stack_id}", response_model=schemas.MoveResponse)
def move_stack(
    stack_id: int, payload: schemas.MoveRequest, db: Session = Depends(get_db)
):
    try:
        stack = services.move_stack(db, stack_id, payload.shelf_id, payload.x, payload.y)
        return schemas.MoveResponse.model_validate(stack)
    except errors.PlacementError as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.exception(f"Error moving stack {stack_id}")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@router.delete("/{stack_id}", status_code=204)
def delete_stack(stack_id: int, db: Session = Depends(get_db)):
    try:
        services.delete_stack(db, stack_id)
    except Exception as e:
        db.rollback()
        logger.exception(f"Error deleting stack {stack_id}")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")
    return Response(status_code=204)

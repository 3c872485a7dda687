import numpy as np
from fastapi import APIRouter, Depends, File, UploadFile, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import pandas as pd
import pydantic

from ..database import get_db
from .. import crud, errors, schemas, services
from ..logger import logger
from .common import to_http_exception

router = APIRouter(tags=["Shelves"])


@router.get("/", response_model=list[schemas.ShelfBase])
def read_shelves(skip: int = 0, limit: int = None, db: Session = Depends(get_db)):
    try:
        return [
            schemas.ShelfBase.model_validate(shelf)
            for shelf in crud.read_shelves(db, skip, limit)
        ]
    except Exception as e:
        logger.error(f"Error reading shelves: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/{shelf_id}", response_model=schemas.ShelfDetail)
def read_shelf(shelf_id: int, db: Session = Depends(get_db)):
    try:
        shelf = crud.get_shelf(db, shelf_id)
        return schemas.ShelfDetail(
            shelf=schemas.ShelfBase.model_validate(shelf),
            stacks=[
                schemas.StackWithDish.model_validate(stack)
                for stack in crud.read_stacks_by_shelf(db, shelf_id)
            ],
        )
    except errors.PlacementError as e:
        raise to_http_exception(e)


@router.post("/{shelf_id}/stacks", response_model=schemas.StackBase, status_code=201)
def place_on_shelf(
    shelf_id: int, payload: schemas.PlaceRequest, db: Session = Depends(get_db)
):
    try:
        stack = services.place_on_shelf(db, shelf_id, payload.dish_id, payload.x)
        return schemas.StackBase.model_validate(stack)
    except errors.PlacementError as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.exception(f"Error placing dish {payload.dish_id} on shelf {shelf_id}")
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@router.post(
    "/{shelf_id}/stacks/stacked", response_model=schemas.StackBase, status_code=201
)
def place_on_shelf_stacked(
    shelf_id: int, payload: schemas.PlaceStackedRequest, db: Session = Depends(get_db)
):
    try:
        stack = services.place_on_shelf_stacked(
            db, shelf_id, payload.dish_id, payload.target_stack_id
        )
        return schemas.StackBase.model_validate(stack)
    except errors.PlacementError as e:
        raise to_http_exception(e)
    except Exception as e:
        db.rollback()
        logger.exception(
            f"Error stacking dish {payload.dish_id} onto stack {payload.target_stack_id}"
        )
        raise HTTPException(status_code=500, detail=f"Internal Server Error: {e}")


@router.post("/upload/", response_model=schemas.uploadResponse)
async def upload_shelves(file: UploadFile = File(...), db: Session = Depends(get_db)):
    try:
        if file.filename.endswith(".csv"):
            df = pd.read_csv(file.file)
        elif file.filename.endswith(".xlsx") or file.filename.endswith(".xls"):
            df = pd.read_excel(file.file)
        else:
            raise HTTPException(
                status_code=400,
                detail="Invalid file type. Only CSV and Excel supported.",
            )

        df_replaced = df.replace({np.nan: None})

        for shelf in df_replaced.to_dict(orient="records"):
            shelf_clean = {k: v for k, v in shelf.items() if v is not None}
            crud.insert_shelf(db, schemas.ShelfCreate(**shelf_clean))
        db.commit()
        return {"message": "Shelves uploaded successfully!"}
    except HTTPException:
        raise
    except pydantic.ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Invalid shelf row: {e}")
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=500, detail=f"Error during shelf creation: {str(e.orig)}"
        )
    except Exception as e:
        logger.error(f"Error uploading shelves: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to upload shelves")

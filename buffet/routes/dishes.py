import numpy as np
from fastapi import APIRouter, Depends, File, UploadFile, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import pandas as pd
import pydantic

from ..database import get_db
from .. import crud, schemas
from ..logger import logger

router = APIRouter(tags=["Dishes"])


@router.get("/", response_model=list[schemas.DishBase])
def read_dishes(skip: int = 0, limit: int = None, db: Session = Depends(get_db)):
    try:
        return [
            schemas.DishBase.model_validate(dish)
            for dish in crud.read_dishes(db, skip, limit)
        ]
    except Exception as e:
        logger.error(f"Error reading dishes: {e}")
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.post("/upload/", response_model=schemas.uploadResponse)
async def upload_dishes(file: UploadFile = File(...), db: Session = Depends(get_db)):
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

        dishes_data = df_replaced.to_dict(orient="records")

        for dish in dishes_data:
            dish_clean = {k: v for k, v in dish.items() if v is not None}
            crud.insert_dish(db, schemas.DishCreate(**dish_clean))
        db.commit()
        return {"message": "Dishes uploaded successfully!"}
    except HTTPException:
        raise
    except pydantic.ValidationError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=f"Invalid dish row: {e}")
    except IntegrityError as e:
        db.rollback()
        raise HTTPException(
            status_code=500, detail=f"Error during dish creation: {str(e.orig)}"
        )
    except Exception as e:
        logger.error(f"Error uploading dishes: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Failed to upload dishes")

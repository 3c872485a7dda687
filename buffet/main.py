from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv
import os

from .database import engine
from .models import Base
from .routes import shelves_routes, stacks_routes, dishes_routes

load_dotenv()

# Create tables
Base.metadata.create_all(bind=engine)
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

app = FastAPI(title="Buffet placement")

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(shelves_routes, prefix="/shelves")
app.include_router(stacks_routes, prefix="/stacks")
app.include_router(dishes_routes, prefix="/dishes")


@app.get("/health")
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "buffet"}

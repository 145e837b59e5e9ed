# gradebook/main.py
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from gradebook.core.config import settings
from gradebook.db.base import Base
from gradebook.db.session import engine
from gradebook.api.v1.endpoints import attendance, courses, evaluations, grades, health
from gradebook import models  # noqa

logging.basicConfig(level=settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)


API_PREFIX = "/api/v1"

app.include_router(health.router, prefix=API_PREFIX)
app.include_router(courses.router, prefix=API_PREFIX)
app.include_router(grades.router, prefix=API_PREFIX)
app.include_router(attendance.router, prefix=API_PREFIX)
app.include_router(evaluations.router, prefix=API_PREFIX)

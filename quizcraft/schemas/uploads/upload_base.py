from enum import Enum

from pydantic import BaseModel, Field


class ImageKind(str, Enum):
    covers = "covers"
    questions = "questions"
    results = "results"


class UploadOut(BaseModel):
    url: str
    path: str = Field(..., description="Storage path relative to the upload root")

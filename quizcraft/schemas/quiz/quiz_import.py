from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class ImportModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ImportAnswer(ImportModel):
    text: str
    personality_type: str = Field(..., alias="personalityType")
    weight: float = 1


class ImportQuestion(ImportModel):
    text: str
    image_url: Optional[str] = Field(None, alias="imageUrl")
    answers: List[ImportAnswer]


class ImportPersonalityType(ImportModel):
    name: str
    description: str = ""
    color: Optional[str] = None
    icon: Optional[str] = None
    result_image_url: Optional[str] = Field(None, alias="resultImageUrl")


class ImportDocument(ImportModel):
    """External quiz definition; answers reference personality types by name."""

    title: str
    description: str
    slug: Optional[str] = None
    questions: List[ImportQuestion]
    personality_types: List[ImportPersonalityType] = Field(..., alias="personalityTypes")

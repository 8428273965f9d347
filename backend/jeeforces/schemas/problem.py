"""Problem schemas"""

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional


def _strip_options(options):
    if options is None:
        return None
    cleaned = [option.strip() for option in options]
    if any(not option for option in cleaned):
        raise ValueError('Options must not be blank')
    return cleaned


def _strip_tags(tags):
    if tags is None:
        return None
    return [tag.strip() for tag in tags if tag.strip()]


class ProblemCreate(BaseModel):
    """Create problem schema"""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=5, max_length=300)
    description: str = Field(..., min_length=20)
    difficulty: int = Field(..., ge=1, le=3)
    score: int = Field(..., gt=0)
    subject: str = Field(..., min_length=1, max_length=50)
    tags: List[str] = Field(default_factory=list)
    options: List[str] = Field(..., min_length=2)
    correct_option: str = Field(..., alias="correctOption")
    solution: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator('options')
    @classmethod
    def options_not_blank(cls, v):
        return _strip_options(v)

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v):
        return _strip_tags(v)

    @model_validator(mode='after')
    def correct_option_is_an_option(self):
        if self.correct_option.strip() not in self.options:
            raise ValueError('correctOption must be one of the options')
        self.correct_option = self.correct_option.strip()
        return self


class ProblemUpdate(BaseModel):
    """Partial update; only the fields sent are changed"""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=5, max_length=300)
    description: Optional[str] = Field(None, min_length=20)
    difficulty: Optional[int] = Field(None, ge=1, le=3)
    score: Optional[int] = Field(None, gt=0)
    subject: Optional[str] = Field(None, min_length=1, max_length=50)
    tags: Optional[List[str]] = None
    options: Optional[List[str]] = Field(None, min_length=2)
    correct_option: Optional[str] = Field(None, alias="correctOption")
    solution: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")

    @field_validator('options')
    @classmethod
    def options_not_blank(cls, v):
        return _strip_options(v)

    @field_validator('tags')
    @classmethod
    def clean_tags(cls, v):
        return _strip_tags(v)


class ProblemResponse(BaseModel):
    """Problem as shown to solvers; the answer is withheld"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    description: str
    difficulty: int
    difficulty_label: str = Field(..., alias="difficultyLabel")
    score: int
    subject: str
    tags: List[str]
    options: List[str]
    image_url: Optional[str] = Field(None, alias="imageUrl")

from datetime import datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

ProjectType = Literal["anchor", "native-rust", "typescript-sdk"]
Language = Literal["rust", "typescript", "toml", "json", "markdown"]

MAX_FEATURES = 20
MAX_FEATURE_LENGTH = 200


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class GenerationRequest(CamelModel):
    project_type: ProjectType
    description: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=5000)]
    features: list[str] = Field(default_factory=list)
    custom_instructions: Annotated[str, StringConstraints(strip_whitespace=True, max_length=2000)] | None = None

    @field_validator("features")
    @classmethod
    def _clean_features(cls, value: list[str]) -> list[str]:
        cleaned = [f.strip() for f in value if f.strip()]
        if len(cleaned) > MAX_FEATURES:
            raise ValueError(f"at most {MAX_FEATURES} features are allowed")
        too_long = [f for f in cleaned if len(f) > MAX_FEATURE_LENGTH]
        if too_long:
            raise ValueError(f"features must be at most {MAX_FEATURE_LENGTH} characters")
        return cleaned


class GenerateBody(GenerationRequest):
    provider: str | None = None  # None / "default" → first available provider


class GeneratedFile(CamelModel):
    path: str
    content: str
    language: Language


class GenerationResult(CamelModel):
    files: list[GeneratedFile] = Field(min_length=1)
    instructions: str
    next_steps: list[str]


class GenerationMetadata(CamelModel):
    provider: str
    project_type: ProjectType
    generated_at: datetime


class GenerateResponse(CamelModel):
    success: bool = True
    result: GenerationResult
    metadata: GenerationMetadata

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator


class Tone(str, Enum):
    alarmist = "Alarmist"
    optimistic = "Optimistic"
    analytical = "Analytical"
    neutral = "Neutral"


class Frame(str, Enum):
    political = "Political"
    economic = "Economic"
    humanitarian = "Humanitarian"
    security = "Security"
    other = "Other"


class Article(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str  # "<prefixo>-<índice>", estável só dentro de um fetch
    source_name: str = Field("Unknown", alias="source")
    title: str = "Untitled"
    summary: str = ""
    url: Optional[str] = None
    image_url: Optional[str] = Field(None, alias="imageUrl")
    # str e não Enum: labels do LLM são copiados como vierem
    tone: Optional[str] = None
    frame: Optional[str] = None

    @computed_field
    @property
    def name(self) -> str:
        return self.source_name


class ArticleLabel(BaseModel):
    id: str
    tone: Optional[str] = None
    frame: Optional[str] = None


class SynthesisSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: Optional[str] = None
    one_sentence: Optional[str] = Field(None, alias="oneSentence")


class SynthesisResult(BaseModel):
    """Saída do LLM para um tópico. Qualquer campo pode faltar."""
    model_config = ConfigDict(populate_by_name=True)

    summary: Optional[SynthesisSummary] = None
    blind_spots: List[str] = Field(default_factory=list, alias="blindSpots")
    labels: List[ArticleLabel] = Field(default_factory=list)

    @field_validator("blind_spots", "labels", mode="before")
    @classmethod
    def _null_as_empty(cls, v):
        return [] if v is None else v


class CombinedSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str
    one_sentence: Optional[str] = Field(None, alias="oneSentence")


class BlindSpots(BaseModel):
    items: List[str] = Field(default_factory=list)


class Story(BaseModel):
    """Story estática (seed). Campos extras do dataset são mantidos."""
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    sources_count: int = Field(0, alias="sourcesCount")
    last_updated: Optional[str] = Field(None, alias="lastUpdated")


class StorySummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    tags: List[str]
    sources: int
    last_updated: Optional[str] = Field(None, alias="lastUpdated")


class StoryPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str
    title: str
    tags: List[str] = Field(default_factory=list)
    sources_count: int = Field(0, alias="sourcesCount")
    sources: List[Article] = Field(default_factory=list)
    last_updated: Optional[str] = Field(None, alias="lastUpdated")
    combined_summary: CombinedSummary = Field(alias="combinedSummary")
    blind_spots: BlindSpots = Field(default_factory=BlindSpots, alias="blindSpots")


class CacheEntry(BaseModel):
    value: StoryPayload
    stored_at: float

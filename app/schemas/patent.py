"""Pydantic schemas for canonical patent records and search payloads."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PatentSource(str, Enum):
    GOOGLE = "google"
    WIPO = "wipo"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PatentRecord(CamelModel):
    """Canonical patent record every source converges to.

    String fields are always present; absence is expressed as ``""`` or as a
    sentinel, never as ``None``.
    """

    id: str = Field("", description="Canonical publication identifier, may be empty.")
    title: str = ""
    date: str = Field("", description="ISO YYYY-MM-DD publication date or empty.")
    inventors: List[str] = Field(..., min_length=1)
    applicant: str = ""
    abstract: str = ""
    source_url: str = Field("", description="Detail page of the record.")
    pdf_url: str = ""
    status: Literal["available"] = "available"
    source: Optional[PatentSource] = None
    rank: Optional[int] = Field(None, ge=1)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class SearchRequest(CamelModel):
    keywords: Union[str, List[str]] = Field(
        ..., description="A keyword string or a list of keywords (one query clause each)."
    )
    max_results: int = Field(10, ge=1, description="Result cap applied per source.")
    source: Literal["all", "google", "wipo"] = "all"

    @field_validator("keywords")
    @classmethod
    def strip_keywords(cls, value: Union[str, List[str]]) -> Union[str, List[str]]:
        if isinstance(value, list):
            return [item.strip() for item in value if item and item.strip()]
        return value.strip()

    @property
    def keyword_list(self) -> List[str]:
        if isinstance(self.keywords, list):
            return list(self.keywords)
        return [self.keywords] if self.keywords else []


class SearchResponse(CamelModel):
    patents: List[PatentRecord]
    total: int
    keywords: Union[str, List[str]]
    timestamp: datetime
    sources: List[str]
    failed_sources: List[str] = Field(default_factory=list)

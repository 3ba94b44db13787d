"""Core domain models for entity resolution.

This module defines the data structures used throughout the resolver:
- CandidateRecord: unvalidated entity extracted from one model response
- CandidateSet: the ``{"companies": [...]}`` envelope a response parses into
- CanonicalRecord: persisted, deduplicated entity keyed by website host
- WebSearchResult / WebSearchResponse: scoped web search output

Model output is loosely typed, so every profile field is coerced leniently:
placeholder strings ("unknown", "N/A") and garbage become None instead of
failing validation of the whole record.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from resolver.utils.sanitize import coerce_bool, coerce_number, coerce_text


class EntityKind(str, Enum):
    """Kind of entity a query resolves to; each kind has its own store."""

    COMPANY = "company"
    PLATFORM = "platform"


_WIRE_CONFIG = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


def _string_list(value: Any) -> List[str]:
    """Keep the non-empty strings of a list; a lone string becomes a 1-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    cleaned = []
    for item in value:
        text = coerce_text(item) if isinstance(item, str) else None
        if text:
            cleaned.append(text)
    return cleaned


def _named_entries(value: Any, secondary_key: str) -> List[dict]:
    """Normalize a founders/leadership list into dicts that carry a name."""
    if not isinstance(value, (list, tuple)):
        return []
    entries = []
    for item in value:
        if isinstance(item, str):
            name = coerce_text(item)
            if name:
                entries.append({"name": name})
        elif isinstance(item, BaseModel):
            entries.append(item.model_dump())
        elif isinstance(item, dict):
            name = coerce_text(item.get("name"))
            if name:
                entries.append({"name": name, secondary_key: item.get(secondary_key)})
    return entries


class Headquarters(BaseModel):
    """Headquarters location."""

    model_config = _WIRE_CONFIG

    city: Optional[str] = None
    country: Optional[str] = None

    @field_validator("city", "country", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)


class Founder(BaseModel):
    model_config = _WIRE_CONFIG

    name: str
    role: Optional[str] = None

    @field_validator("role", mode="before")
    @classmethod
    def clean_role(cls, v: Any) -> Optional[str]:
        return coerce_text(v)


class Leader(BaseModel):
    model_config = _WIRE_CONFIG

    name: str
    title: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def clean_title(cls, v: Any) -> Optional[str]:
        return coerce_text(v)


class FundingRound(BaseModel):
    """Most recent funding round."""

    model_config = _WIRE_CONFIG

    round: Optional[str] = None
    amount_usd: Optional[float] = Field(None, alias="amountUSD")
    date: Optional[str] = None

    @field_validator("round", "date", mode="before")
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("amount_usd", mode="before")
    @classmethod
    def clean_amount(cls, v: Any) -> Optional[float]:
        return coerce_number(v)


class EntityProfile(BaseModel):
    """Descriptive fields shared by candidate and canonical records."""

    model_config = _WIRE_CONFIG

    name: Optional[str] = None
    domain: Optional[str] = None
    date_of_incorporation: Optional[str] = None
    founded_year: Optional[str] = None
    description: Optional[str] = None
    industries: List[str] = Field(default_factory=list)
    hq: Optional[Headquarters] = None
    employee_count: Optional[str] = None
    founders: List[Founder] = Field(default_factory=list)
    leadership: List[Leader] = Field(default_factory=list)
    linkedin_url: Optional[str] = None
    crunchbase_url: Optional[str] = None
    traxcn_url: Optional[str] = None
    funding_total_usd: Optional[float] = Field(None, alias="fundingTotalUSD")
    last_funding: Optional[FundingRound] = None
    is_public: Optional[bool] = None
    ticker: Optional[str] = None

    @field_validator(
        "name",
        "domain",
        "date_of_incorporation",
        "founded_year",
        "description",
        "employee_count",
        "linkedin_url",
        "crunchbase_url",
        "traxcn_url",
        "ticker",
        mode="before",
    )
    @classmethod
    def clean_text(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("industries", mode="before")
    @classmethod
    def clean_industries(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("hq", mode="before")
    @classmethod
    def clean_hq(cls, v: Any) -> Optional[Any]:
        if isinstance(v, (dict, Headquarters)):
            return v
        text = coerce_text(v) if isinstance(v, str) else None
        if not text:
            return None
        # "Bengaluru, India" -> city + country
        city, _, country = text.rpartition(",")
        if city:
            return {"city": city.strip(), "country": country.strip()}
        return {"city": text}

    @field_validator("founders", mode="before")
    @classmethod
    def clean_founders(cls, v: Any) -> List[Any]:
        return _named_entries(v, "role")

    @field_validator("leadership", mode="before")
    @classmethod
    def clean_leadership(cls, v: Any) -> List[Any]:
        return _named_entries(v, "title")

    @field_validator("last_funding", mode="before")
    @classmethod
    def clean_last_funding(cls, v: Any) -> Optional[Any]:
        return v if isinstance(v, (dict, FundingRound)) else None

    @field_validator("funding_total_usd", mode="before")
    @classmethod
    def clean_funding_total(cls, v: Any) -> Optional[float]:
        return coerce_number(v)

    @field_validator("is_public", mode="before")
    @classmethod
    def clean_is_public(cls, v: Any) -> Optional[bool]:
        return coerce_bool(v)


class CandidateRecord(EntityProfile):
    """Unvalidated entity extracted from a single model response.

    Lives for one resolution cycle only. ``sources`` records where the data
    came from (URLs supplied by the model plus the attribution added by the
    integrity validator); ``confidence`` is the model's self-reported
    certainty in [0, 1].
    """

    website_url: Optional[str] = None
    sources: List[str] = Field(default_factory=list)
    confidence: Optional[float] = None
    logo_base64: Optional[str] = None

    @field_validator("website_url", mode="before")
    @classmethod
    def clean_website(cls, v: Any) -> Optional[str]:
        return coerce_text(v)

    @field_validator("sources", mode="before")
    @classmethod
    def clean_sources(cls, v: Any) -> List[str]:
        return _string_list(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def clean_confidence(cls, v: Any) -> Optional[float]:
        number = coerce_number(v)
        if number is None:
            return None
        # Some models answer in percent
        if 1.0 < number <= 100.0:
            number = number / 100.0
        return min(max(number, 0.0), 1.0)

    @property
    def has_identity(self) -> bool:
        """True when name, website URL and domain are all present."""
        return bool(self.name and self.website_url and self.domain)

    def to_payload(self) -> dict:
        """JSON-ready camelCase representation without empty fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    model_config = ConfigDict(
        **_WIRE_CONFIG,
        json_schema_extra={"example": {
            "name": "Naukri.com",
            "websiteUrl": "https://naukri.com",
            "domain": "naukri.com",
            "industries": ["Internet", "Recruitment"],
            "hq": {"city": "Noida", "country": "India"},
            "isPublic": True,
            "ticker": "NAUKRI",
            "sources": ["https://www.crunchbase.com/organization/naukri-com"],
            "confidence": 0.9,
        }},
    )


class CandidateSet(BaseModel):
    """Envelope of candidates parsed from one response."""

    companies: List[CandidateRecord] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.companies)

    @property
    def is_empty(self) -> bool:
        return not self.companies


class CanonicalRecord(EntityProfile):
    """Persisted entity, unique per canonical website host.

    ``website_url`` holds the canonical form (``scheme://host``, lowercased,
    ``www.`` stripped) and is the identity key; ``domain`` is a secondary
    lookup key.
    """

    id: str
    kind: EntityKind = EntityKind.COMPANY
    website_url: str
    name: str
    logo_url: Optional[str] = None
    sources: List[str] = Field(default_factory=list)
    confidence: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("sources", mode="before")
    @classmethod
    def clean_sources(cls, v: Any) -> List[str]:
        return _string_list(v)

    def to_payload(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WebSearchResult(BaseModel):
    """One hit returned by the web search collaborator."""

    title: str = ""
    url: str = ""
    content: str = ""
    domain: str = ""
    score: float = 0.0


class WebSearchResponse(BaseModel):
    """Web search output; ``has_results`` is the usefulness verdict."""

    query: str
    results: List[WebSearchResult] = Field(default_factory=list)
    has_results: bool = False

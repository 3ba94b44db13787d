"""Configuration schema models using Pydantic."""

from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .duration import DurationParseError, parse_duration, validate_duration_range


class ModelRole(str, Enum):
    """Role a model plays in the fallback chain."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    REASONING = "reasoning"
    WEB_PROCESSING = "web-processing"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class SearchDepth(str, Enum):
    """Web search depth understood by the search provider."""

    BASIC = "basic"
    ADVANCED = "advanced"


class ModelTierConfig(BaseModel):
    """A single language model entry in the fallback chain."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Model identifier sent to the chat API")
    name: str = Field(..., min_length=1, description="Human-readable model name")
    temperature: float = Field(0.3, ge=0.0, le=2.0)
    max_tokens: int = Field(3000, gt=0)
    role: ModelRole = Field(..., description="Tier this model belongs to")

    @field_validator("id", "name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped


_ROLE_FIELDS = {
    "primary_models": ModelRole.PRIMARY,
    "secondary_models": ModelRole.SECONDARY,
    "reasoning_models": ModelRole.REASONING,
    "web_processing_models": ModelRole.WEB_PROCESSING,
}


class FallbackChainConfig(BaseModel):
    """Ordered model priority lists for every tier.

    Immutable: the orchestrator receives one instance in its constructor and
    never changes it.
    """

    model_config = ConfigDict(frozen=True)

    primary_models: Tuple[ModelTierConfig, ...] = ()
    secondary_models: Tuple[ModelTierConfig, ...] = ()
    reasoning_models: Tuple[ModelTierConfig, ...] = ()
    web_processing_models: Tuple[ModelTierConfig, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def fill_missing_roles(cls, data):
        """Default each model's role from the list it appears in."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for field_name, role in _ROLE_FIELDS.items():
            models = data.get(field_name)
            if isinstance(models, (list, tuple)):
                data[field_name] = [
                    {"role": role.value, **model} if isinstance(model, dict) else model
                    for model in models
                ]
        return data

    @model_validator(mode="after")
    def validate_roles(self):
        """Each model must sit in the list matching its declared role."""
        for role, models in self._by_role().items():
            for model in models:
                if model.role != role:
                    raise ValueError(
                        f"Model '{model.id}' has role '{model.role.value}' "
                        f"but is listed under '{role.value}'"
                    )
        return self

    def _by_role(self):
        return {role: getattr(self, field_name) for field_name, role in _ROLE_FIELDS.items()}

    def models_for(self, role: ModelRole) -> Tuple[ModelTierConfig, ...]:
        """Return the priority-ordered models configured for ``role``."""
        return self._by_role()[role]


DEFAULT_FALLBACK_CHAIN = FallbackChainConfig(
    primary_models=(
        ModelTierConfig(
            id="inception/mercury-coder:nitro",
            name="Mercury-Coder",
            temperature=0.3,
            max_tokens=3500,
            role=ModelRole.PRIMARY,
        ),
    ),
    secondary_models=(
        ModelTierConfig(
            id="mistralai/mistral-small-3.2-24b-instruct:free:nitro",
            name="Mistral-Small",
            temperature=0.3,
            max_tokens=3500,
            role=ModelRole.SECONDARY,
        ),
    ),
    reasoning_models=(
        ModelTierConfig(
            id="deepseek/deepseek-r1:free",
            name="DeepSeek-R1",
            temperature=0.3,
            max_tokens=4000,
            role=ModelRole.REASONING,
        ),
    ),
    web_processing_models=(
        ModelTierConfig(
            id="moonshotai/kimi-k2:free",
            name="Kimi K2",
            temperature=0.3,
            max_tokens=4000,
            role=ModelRole.WEB_PROCESSING,
        ),
    ),
)


DEFAULT_INCLUDE_DOMAINS = (
    "crunchbase.com",
    "linkedin.com",
    "traxcn.com",
    "bloomberg.com",
    "techcrunch.com",
    "forbes.com",
    "reuters.com",
    "sec.gov",
    "companieshouse.gov.uk",
)

DEFAULT_EXCLUDE_DOMAINS = (
    "wikipedia.org",
    "facebook.com",
    "twitter.com",
    "instagram.com",
    "youtube.com",
)


class WebSearchConfig(BaseModel):
    """Scoped web search used by the last tier of the chain."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    max_results: int = Field(15, ge=1, le=50)
    search_depth: SearchDepth = SearchDepth.BASIC
    include_domains: Tuple[str, ...] = DEFAULT_INCLUDE_DOMAINS
    exclude_domains: Tuple[str, ...] = DEFAULT_EXCLUDE_DOMAINS
    min_relevance_score: float = Field(0.3, ge=0.0, le=1.0)
    max_snippets: int = Field(10, ge=1, le=50)
    snippet_chars: int = Field(500, ge=50, le=5000)

    @field_validator("include_domains", "exclude_domains")
    @classmethod
    def normalize_domains(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        """Lowercase, strip, and drop empty domain entries."""
        return tuple(d.strip().lower() for d in v if d and d.strip())

    @model_validator(mode="after")
    def validate_lists_disjoint(self):
        overlap = set(self.include_domains) & set(self.exclude_domains)
        if overlap:
            raise ValueError(
                f"Domains cannot be both included and excluded: {', '.join(sorted(overlap))}"
            )
        return self


class RateLimitConfig(BaseModel):
    """In-process request budget for the search entry point."""

    max_requests: int = Field(30, ge=1)
    window: str = Field("1m", description="Window length, e.g. '1m' or 'PT1M'")

    window_seconds: Optional[int] = None

    @field_validator("window")
    @classmethod
    def validate_window(cls, v: str) -> str:
        try:
            seconds = parse_duration(v)
            validate_duration_range(seconds, min_seconds=1, max_seconds=86400, label="Rate limit window")
        except DurationParseError as e:
            raise ValueError(str(e)) from e
        return v

    @model_validator(mode="after")
    def compute_window_seconds(self):
        self.window_seconds = parse_duration(self.window)
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(LogFormat.KEY_VALUE, description="Log output format")

    model_config = ConfigDict(use_enum_values=True)


class AdvancedConfig(BaseModel):
    """HTTP settings shared by every external collaborator."""

    http_request_timeout: int = Field(30, ge=5, le=300, description="Request timeout (seconds)")
    user_agent: str = Field("CompanyResolver/1.0", min_length=1)
    chat_base_url: str = Field("https://openrouter.ai/api/v1", min_length=1)
    web_search_url: str = Field("https://api.tavily.com/search", min_length=1)
    logo_base_url: str = Field("https://logo.clearbit.com", min_length=1)

    @field_validator("user_agent", "chat_base_url", "web_search_url", "logo_base_url")
    @classmethod
    def strip_value(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Field cannot be empty or whitespace-only")
        return stripped.rstrip("/") if "://" in stripped else stripped


class AppConfig(BaseModel):
    """Root configuration object."""

    fallback_chain: FallbackChainConfig = Field(default_factory=lambda: DEFAULT_FALLBACK_CHAIN)
    web_search: WebSearchConfig = Field(default_factory=WebSearchConfig)
    rate_limit: RateLimitConfig = Field(default_factory=RateLimitConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    advanced: AdvancedConfig = Field(default_factory=AdvancedConfig)

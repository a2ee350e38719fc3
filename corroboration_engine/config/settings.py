"""Engine settings using Pydantic BaseSettings for environment variable management."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Global engine settings loaded from environment variables (prefix ENGINE_).

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log output format (json for production, console for dev)
        link_check_timeout: Per-request timeout for live link checks (seconds)
        link_check_budget: Hard ceiling on link checks per request
        link_check_concurrency: Maximum link checks in flight at once
        best_links_limit: Size of the "best sources" list
        source_pool_limit: Size of the full source pool
        min_rationale_length: Minimum rationale length for a usable source
        neutral_support_weight: Multiplier applied to neutral sources when
            weighting support in the contradiction score
        hard_contradiction_threshold: Weighted score above which a hard
            contradiction leaves the verdict unresolved
        oracle_max_attempts: Attempts made against the evidence oracle
        user_agent: User-Agent header sent by the link verifier
    """

    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(
        default="json",
        description="Log output format: json or console"
    )
    link_check_timeout: float = Field(
        default=1.2,
        gt=0,
        description="Timeout in seconds for a single live link check"
    )
    link_check_budget: int = Field(
        default=8,
        ge=0,
        description="Total link checks allowed per request"
    )
    link_check_concurrency: int = Field(
        default=4,
        ge=1,
        description="Concurrent link checks"
    )
    best_links_limit: int = Field(default=4, ge=1)
    source_pool_limit: int = Field(default=10, ge=1)
    min_rationale_length: int = Field(
        default=10,
        ge=0,
        description="Sources with shorter rationale text are not actionable"
    )
    neutral_support_weight: float = Field(
        default=0.5,
        ge=0.0,
        le=1.0,
        description="Weight of neutral coverage relative to corroborating evidence"
    )
    hard_contradiction_threshold: int = Field(
        default=50,
        ge=0,
        le=100,
        description="Weighted contradiction score that leaves the verdict uncertain"
    )
    oracle_max_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts against the evidence oracle before degrading"
    )
    user_agent: str = Field(
        default="Mozilla/5.0 (compatible; CorroborationEngine/0.1)",
        description="User agent for live link checks"
    )

    model_config = {
        "env_prefix": "ENGINE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance - import this throughout the application
settings = Settings()

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # --- Runtime ---
    ENV: str = "dev"  # dev|prod
    LOG_LEVEL: str = "INFO"

    # --- Minimal B2B Auth (API key) ---
    # Send: X-API-Key: <key>
    API_KEY: str | None = None

    # --- LLM (Anthropic) ---
    # CLAUDE_API_KEY wins over ANTHROPIC_API_KEY when both are set.
    ANTHROPIC_API_KEY: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CLAUDE_API_KEY", "ANTHROPIC_API_KEY"),
    )
    LLM_MODEL: str = "claude-3-5-sonnet-20241022"
    LLM_MAX_TOKENS_ANALYSIS: int = 2000
    LLM_MAX_TOKENS_COST: int = 3000
    LLM_MAX_TOKENS_MATCH: int = 2000
    LLM_MAX_TOKENS_CHAT: int = 2000
    LLM_TIMEOUT_S: float = 120.0

    # --- Permit source (Shovels today; stub_json for offline dev) ---
    PERMIT_SOURCE: str = "shovels"  # shovels|stub_json
    SHOVELS_API_KEY: str | None = Field(
        default=None,
        validation_alias=AliasChoices("SHOVELS_API_KEY", "NEXT_PUBLIC_SHOVELS_API_KEY"),
    )
    SHOVELS_BASE_URL: str = "https://api.shovels.ai/v1"
    PERMIT_FIXTURES_DIR: str = "data/stub_permits"

    # --- Region (NAMC NorCal) ---
    DEFAULT_STATE: str = "CA"
    DEFAULT_CITIES: list[str] = ["San Francisco", "Oakland", "San Jose", "Fremont", "Berkeley"]

    # --- Pipeline tuning (LLM spend control) ---
    AI_ANALYSIS_CAP: int = 10
    LLM_CALL_INTERVAL_S: float = 1.0
    CITY_SEARCH_INTERVAL_S: float = 2.0
    MAX_CITIES_PER_SEARCH: int = 3
    DEFAULT_SEARCH_LIMIT: int = 50
    OPPORTUNITY_SEARCH_LIMIT: int = 25
    MARKET_WINDOW_DAYS: int = 90
    MARKET_SEARCH_LIMIT: int = 100
    TOP_CONTRACTORS_LIMIT: int = 10
    CONTRACTOR_SEARCH_LIMIT: int = 100

    # --- Outbound HTTP resilience ---
    HTTP_TIMEOUT_S: float = 20.0
    HTTP_MAX_RETRIES: int = 2
    HTTP_BACKOFF_BASE_S: float = 0.5
    HTTP_CIRCUIT_FAIL_THRESHOLD: int = 5
    HTTP_CIRCUIT_RESET_S: float = 60.0


settings = Settings()

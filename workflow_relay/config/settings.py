"""Typed runtime settings for the relay service and its upstream workflow API."""

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


class AppSettings(BaseSettings):
    """Application settings for API runtime and remote workflow access.

    Environment variable names map directly to field names in uppercase.
    Example: `workflow_api_token` reads from `WORKFLOW_API_TOKEN`.

    Attributes:
        environment_name: Runtime environment label.
        application_host: Host interface for web server binding.
        application_port: Web server port.
        log_level: Root logging level name.
        workflow_api_base_url: Remote workflow service base URL.
        workflow_run_path: Job submission endpoint path.
        workflow_retrieve_path: Job status endpoint path.
        workflow_api_token: Fallback bearer credential when requests carry none.
        workflow_default_id: Fallback workflow identifier when requests carry none.
        workflow_request_timeout_seconds: Per-request HTTP timeout.
        workflow_default_max_wait_seconds: Wait budget used when requests carry none.
        workflow_max_wait_seconds_limit: Upper bound for caller-supplied wait budgets.
        workflow_max_consecutive_inconclusive_polls: Optional fail-fast cap for inconclusive polls.
        cors_allow_origins: Origins allowed by the CORS middleware.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    environment_name: str = Field(default="development")
    application_host: str = Field(default="0.0.0.0")
    application_port: int = Field(default=8000, ge=1, le=65535)
    log_level: str = Field(default="INFO")
    workflow_api_base_url: str = Field(default="https://api.coze.cn", min_length=1)
    workflow_run_path: str = Field(default="/v1/workflow/run", min_length=1)
    workflow_retrieve_path: str = Field(default="/v1/workflow/run/retrieve", min_length=1)
    workflow_api_token: str | None = Field(default=None)
    workflow_default_id: str | None = Field(default=None)
    workflow_request_timeout_seconds: float = Field(default=120.0, gt=0)
    workflow_default_max_wait_seconds: float = Field(default=60.0, ge=0)
    workflow_max_wait_seconds_limit: float = Field(default=600.0, gt=0)
    workflow_max_consecutive_inconclusive_polls: int | None = Field(default=None, ge=1)
    cors_allow_origins: list[str] = Field(default_factory=lambda: ["*"])

    @field_validator("workflow_api_token", "workflow_default_id")
    @classmethod
    def _validate_optional_string(cls, value: str | None) -> str | None:
        if value is None:
            return None
        stripped_value = value.strip()
        return stripped_value or None

    @field_validator("log_level")
    @classmethod
    def _validate_log_level(cls, value: str) -> str:
        normalized_value = value.strip().upper()
        if normalized_value not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unsupported log_level={value}")
        return normalized_value

    @field_validator("workflow_max_wait_seconds_limit")
    @classmethod
    def _validate_wait_limit_bounds(cls, value: float, info) -> float:
        default_wait_seconds = float(info.data.get("workflow_default_max_wait_seconds", 60.0))
        if value < default_wait_seconds:
            raise ValueError(
                "workflow_max_wait_seconds_limit must be greater than or equal to workflow_default_max_wait_seconds"
            )
        return value


def config_load_settings() -> AppSettings:
    """Load and validate runtime settings from environment and dotenv.

    Returns:
        AppSettings: Validated runtime settings object.

    Raises:
        SettingsLoadError: Raised when settings are invalid.
    """

    try:
        return AppSettings()
    except ValidationError as error:
        raise SettingsLoadError(
            f"Workflow relay configuration is invalid. Check .env or environment variables. Details: {error}"
        ) from error

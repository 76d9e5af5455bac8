"""SDK configuration."""

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .exceptions import ConfigurationError

DEFAULT_BATCH_SIZE = 10
DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_TIMEOUT_SECONDS = 10.0


class SDKConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    api_key: str
    endpoint: str
    user_id: Optional[str] = None
    batch_size: int = Field(default=DEFAULT_BATCH_SIZE, gt=0)
    # Stored for callers; the batcher retries failed batches without a limit.
    retry_attempts: int = Field(default=DEFAULT_RETRY_ATTEMPTS, ge=0)

    @field_validator("batch_size", mode="before")
    @classmethod
    def _default_batch_size(cls, value):
        # 0 counts as "not supplied"
        return value or DEFAULT_BATCH_SIZE

    @field_validator("retry_attempts", mode="before")
    @classmethod
    def _default_retry_attempts(cls, value):
        return value or DEFAULT_RETRY_ATTEMPTS


def load_config(
    config: Union[SDKConfig, Mapping[str, Any], None] = None,
    **options: Any,
) -> SDKConfig:
    """Build a normalized :class:`SDKConfig`.

    Args:
        config: An existing ``SDKConfig`` or a mapping of settings.
        **options: Individual settings; these override ``config``.

    Raises:
        ConfigurationError: ``api_key`` or ``endpoint`` is empty or missing,
            or another setting fails validation.
    """
    if isinstance(config, SDKConfig):
        values = config.model_dump()
    else:
        values = dict(config or {})
    values.update(options)

    if not values.get("api_key") or not values.get("endpoint"):
        raise ConfigurationError(
            "API key and endpoint are required for initialization."
        )

    try:
        return SDKConfig(**values)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid SDK configuration: {exc}") from exc

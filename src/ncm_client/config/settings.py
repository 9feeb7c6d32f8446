"""Configuration settings for the NCM client.

Settings are loaded from environment variables and an optional ``.env``
file. Keyword arguments given to :class:`ncm_client.client.NcmClient`
take precedence over anything loaded here.
"""

from typing import Dict, List, Literal, Optional

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BASE_URL = "https://www.cradlepointecm.com/api/v2"


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    :param base_url: Root URL of the NCM API
    :type base_url: str
    :param cp_api_id: Value of the ``X-CP-API-ID`` header
    :type cp_api_id: Optional[str]
    :param cp_api_key: Value of the ``X-CP-API-KEY`` header
    :type cp_api_key: Optional[str]
    :param ecm_api_id: Value of the ``X-ECM-API-ID`` header
    :type ecm_api_id: Optional[str]
    :param ecm_api_key: Value of the ``X-ECM-API-KEY`` header
    :type ecm_api_key: Optional[str]
    :param log_events: Emit a notice for each API response
    :type log_events: bool
    :param retries: Retry attempts on transient failures
    :type retries: int
    :param retry_backoff_factor: Multiplier for the exponential backoff
    :type retry_backoff_factor: float
    :param retry_on: Status codes that trigger a retry
    :type retry_on: List[int]
    :param max_redirects: Redirects followed before giving up
    :type max_redirects: int
    :param timeout: Per-request timeout in seconds
    :type timeout: float
    :param log_level: Logging level used by the command line
    :type log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    base_url: str = Field(
        DEFAULT_BASE_URL,
        validation_alias=AliasChoices("CP_BASE_URL", "NCM_BASE_URL"),
        description="NCM API base URL",
    )

    # API keys, named after the headers they populate
    cp_api_id: Optional[str] = Field(
        None,
        validation_alias="X_CP_API_ID",
        description="X-CP-API-ID header value",
    )
    cp_api_key: Optional[str] = Field(
        None,
        validation_alias="X_CP_API_KEY",
        description="X-CP-API-KEY header value",
    )
    ecm_api_id: Optional[str] = Field(
        None,
        validation_alias="X_ECM_API_ID",
        description="X-ECM-API-ID header value",
    )
    ecm_api_key: Optional[str] = Field(
        None,
        validation_alias="X_ECM_API_KEY",
        description="X-ECM-API-KEY header value",
    )

    log_events: bool = Field(
        True,
        validation_alias="NCM_LOG_EVENTS",
        description="Log a notice for every API response",
    )

    # Transport
    retries: int = Field(
        5,
        ge=0,
        validation_alias="NCM_RETRIES",
        description="Retry attempts on transient failures",
    )
    retry_backoff_factor: float = Field(
        2.0,
        ge=0,
        validation_alias="NCM_RETRY_BACKOFF_FACTOR",
        description="Backoff multiplier between retries",
    )
    retry_on: List[int] = Field(
        default_factory=lambda: [408, 503, 504],
        validation_alias="NCM_RETRY_ON",
        description="HTTP status codes that trigger a retry",
    )
    max_redirects: int = Field(
        3,
        ge=0,
        validation_alias="NCM_MAX_REDIRECTS",
        description="Maximum redirects followed per request",
    )
    timeout: float = Field(
        30.0,
        gt=0,
        validation_alias="NCM_TIMEOUT",
        description="Per-request timeout in seconds",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO",
        validation_alias="LOG_LEVEL",
        description="Logging level",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalise the base URL so endpoint paths can be appended.

        :param v: Raw base URL
        :type v: str
        :return: Base URL without a trailing slash
        :rtype: str
        """
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, v):
        if isinstance(v, str):
            return v.upper()
        return v

    @property
    def api_keys(self) -> Dict[str, str]:
        """Return the credential headers that are configured.

        Keys that are unset are left out, so an incomplete set is caught
        by the same validation as keys passed in code.

        :return: Mapping of header name to value
        :rtype: Dict[str, str]
        """
        pairs = (
            ("X-CP-API-ID", self.cp_api_id),
            ("X-CP-API-KEY", self.cp_api_key),
            ("X-ECM-API-ID", self.ecm_api_id),
            ("X-ECM-API-KEY", self.ecm_api_key),
        )
        return {name: value for name, value in pairs if value}


def get_settings(**overrides) -> Settings:
    """Load settings from the environment, applying keyword overrides.

    :param overrides: Field values that take precedence over the environment
    :return: Loaded settings
    :rtype: Settings
    """
    return Settings(**overrides)

from __future__ import annotations

from typing import Any, Optional
from urllib.parse import urlparse

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigError(RuntimeError):
    """Raised when a required setting is missing or invalid at startup."""


def _validate_url(name: str, value: str) -> None:
    if not value:
        raise ConfigError(f"{name} is missing! Set it in .env or the host environment.")
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https"):
        raise ConfigError(f"{name} must start with http:// or https://")
    if not parsed.netloc:
        raise ConfigError(f"{name} must include a host.")


def _validate_log_level(value: str) -> None:
    allowed = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}
    if (value or "").strip().upper() not in allowed:
        raise ConfigError(f"LOG_LEVEL must be one of: {', '.join(sorted(allowed))}")


class Settings(BaseSettings):
    """
    Bot settings.

    Rules:
    - Immutable once loaded; built once by run_bot() and handed to the bot
    - Fail fast on missing secrets via validate_for_boot()
    - Branding is operator configuration, never hardcoded
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        env_ignore_empty=True,
        frozen=True,
    )

    # -------------------------
    # Core / logging
    # -------------------------
    log_level: str = "INFO"

    # -------------------------
    # Discord bot + OAuth app
    # -------------------------
    discord_token: str = ""
    client_id: str = ""
    redirect_uri: str = ""

    # Optional: register /verify in one guild (fast) instead of globally (up to 1h)
    guild_id: Optional[int] = None

    authorize_url: str = Field(
        default="https://discord.com/oauth2/authorize",
        validation_alias=AliasChoices("authorize_url", "oauth_authorize_url"),
    )

    # -------------------------
    # Panel branding (env prefix VERIFY_)
    # -------------------------
    brand_name: str = Field(default="Wallet Verify", validation_alias=AliasChoices("brand_name", "verify_brand_name"))
    icon_url: str = Field(default="", validation_alias=AliasChoices("icon_url", "verify_icon_url"))
    docs_url: str = Field(default="https://example.com/docs", validation_alias=AliasChoices("docs_url", "verify_docs_url"))
    donate_url: str = Field(
        default="https://example.com/donate",
        validation_alias=AliasChoices("donate_url", "verify_donate_url"),
    )

    # Legacy text trigger; disabling it also drops the message content intent
    legacy_prefix: str = Field(default="!verify", validation_alias=AliasChoices("legacy_prefix", "verify_legacy_prefix"))
    legacy_prefix_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("legacy_prefix_enabled", "verify_legacy_prefix_enabled"),
    )

    @field_validator(
        "discord_token",
        "client_id",
        "redirect_uri",
        "authorize_url",
        "icon_url",
        "docs_url",
        "donate_url",
        mode="before",
    )
    @classmethod
    def _strip(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, v: Any) -> str:
        s = str(v or "").strip().upper()
        return s or "INFO"

    @field_validator("legacy_prefix", mode="before")
    @classmethod
    def _normalize_prefix(cls, v: Any) -> str:
        s = str(v or "").strip().lower()
        return s or "!verify"

    @field_validator("guild_id", mode="before")
    @classmethod
    def _blank_guild_is_global(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def validate_for_boot(self) -> None:
        """
        Strict validation for boot safety.
        """
        if not self.discord_token:
            raise ConfigError("DISCORD_TOKEN is missing! Set it in .env or the host environment.")
        if not self.client_id:
            raise ConfigError("CLIENT_ID is missing! Set it in .env or the host environment.")
        if not self.redirect_uri:
            raise ConfigError("REDIRECT_URI is missing! Set it to your callback URL (e.g. https://host/callback).")

        _validate_url("REDIRECT_URI", self.redirect_uri)
        _validate_url("OAUTH_AUTHORIZE_URL", self.authorize_url)
        _validate_url("VERIFY_DOCS_URL", self.docs_url)
        _validate_url("VERIFY_DONATE_URL", self.donate_url)
        if self.icon_url:
            _validate_url("VERIFY_ICON_URL", self.icon_url)

        _validate_log_level(self.log_level)

        # Discord snowflakes are positive; None means global sync
        if self.guild_id is not None and self.guild_id <= 0:
            raise ConfigError("GUILD_ID must be a positive integer.")

    @property
    def sync_scope(self) -> str:
        return f"guild={self.guild_id}" if self.guild_id else "global"


__all__ = ["ConfigError", "Settings"]

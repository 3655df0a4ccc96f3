from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class HookSettings(BaseSettings):
    """
    Registry defaults loaded from the environment.

    Priority (highest to lowest):
    1. Constructor arguments
    2. Environment variables (HOOKWIRE_*)
    3. .env file
    4. Default values
    """

    model_config = SettingsConfigDict(
        env_prefix="HOOKWIRE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Lower numbers run earlier
    default_priority: int = 10
    default_accepted_args: int = 1

    # Channel whose listeners observe every dispatch
    all_tag: str = "all"

    @field_validator("default_accepted_args")
    @classmethod
    def validate_non_negative(cls, v: int, info) -> int:
        """Ensure the argument count is not negative."""
        if v < 0:
            raise ValueError(f"{info.field_name} must be a non-negative integer, got {v}")
        return v

    @field_validator("all_tag")
    @classmethod
    def validate_tag(cls, v: str, info) -> str:
        """Ensure the reserved tag is a non-empty string."""
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v

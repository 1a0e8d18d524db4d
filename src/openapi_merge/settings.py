"""
Runtime settings for openapi-merge with environment overrides.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings using Pydantic for validation
    and environment variable support.
    """

    log_level: str = Field(default="WARNING", description="Logging level")

    default_schema_conflict: str = Field(
        default="rename", description="Schema conflict strategy when none is given"
    )

    default_output: str = Field(
        default="merged-openapi.json", description="Output file when none is given"
    )

    openapi_version: str = Field(
        default="3.0.3", description="OpenAPI version stamped on merged documents"
    )

    indent: int = Field(default=2, description="Indentation of JSON output")

    model_config = {
        "env_prefix": "OPENAPI_MERGE_",
        "case_sensitive": False,
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v):
        return v.upper()


settings = Settings()

"""Configuration management with Pydantic settings and generator parameters."""

import logging
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from protofilter.errors import InvalidParameterError

PathsMode = Literal["source_relative", "import"]

DEFAULT_PERMISSION_EXTENSION = 50777
MAX_FIELD_NUMBER = 536_870_911


class Settings(BaseSettings):
    """protofilter configuration settings.

    Precedence: plugin parameter > environment variable > .env file > defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROTOFILTER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: str = Field(
        default="WARNING",
        description="Logging level for diagnostics written to stderr",
    )

    permission_extension: int = Field(
        default=DEFAULT_PERMISSION_EXTENSION,
        ge=1,
        le=MAX_FIELD_NUMBER,
        description="Field number of the string FieldOptions extension carrying the permission",
    )

    paths: PathsMode = Field(
        default="source_relative",
        description="Output path convention: source_relative or import",
    )

    runtime_module: str = Field(
        default="protofilter.runtime",
        description="Import path of the runtime module used by generated code",
    )

    file_suffix: str = Field(
        default="_filter",
        min_length=1,
        description="Suffix appended to the proto file stem for generated modules",
    )

    def get_log_level(self) -> int:
        """Resolve ``log_level`` to a logging constant, defaulting to WARNING."""
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.WARNING


class GeneratorOptions(BaseModel):
    """Options for a single generation run."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    paths: PathsMode = "source_relative"
    extension: int = Field(default=DEFAULT_PERMISSION_EXTENSION, ge=1, le=MAX_FIELD_NUMBER)
    runtime: str = Field(default="protofilter.runtime", pattern=r"^[A-Za-z_][\w.]*$")
    suffix: str = Field(default="_filter", pattern=r"^\w+$")

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeneratorOptions":
        return cls(
            paths=settings.paths,
            extension=settings.permission_extension,
            runtime=settings.runtime_module,
            suffix=settings.file_suffix,
        )

    @classmethod
    def from_parameter(cls, parameter: str, settings: Settings | None = None) -> "GeneratorOptions":
        """Parse a ``protoc`` parameter string such as ``paths=source_relative``.

        Args:
            parameter: Comma-separated ``key=value`` pairs, possibly empty.
            settings: Defaults for keys the parameter omits.

        Raises:
            InvalidParameterError: On a malformed pair, unknown key or bad value.
        """
        base = cls.from_settings(settings or get_settings())
        overrides: dict[str, str] = {}
        for item in parameter.split(","):
            item = item.strip()
            if not item:
                continue
            key, sep, value = item.partition("=")
            if not sep or not key.strip():
                raise InvalidParameterError(f"Invalid parameter {item!r}: expected key=value")
            overrides[key.strip()] = value.strip()

        if not overrides:
            return base

        try:
            return cls.model_validate({**base.model_dump(), **overrides})
        except ValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in exc.errors()
            )
            raise InvalidParameterError(f"Invalid parameter: {problems}") from exc


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get or create the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Settings) -> None:
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings

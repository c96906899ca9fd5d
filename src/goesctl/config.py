from pathlib import Path
from typing import Any

import envyaml
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict, YamlConfigSettingsSource
from pydantic_settings.sources.types import DEFAULT_PATH, PathType


class EnvYamlConfigSettingsSource(YamlConfigSettingsSource):
    def __init__(
        self,
        settings_cls: type[BaseSettings],
        *,
        yaml_file: PathType | None = DEFAULT_PATH,
        yaml_file_encoding: str | None = None,
        env_file: Path | str | None = None,
    ):
        self.env_file = env_file or settings_cls.model_config.get("env_file")
        super().__init__(settings_cls, yaml_file=yaml_file, yaml_file_encoding=yaml_file_encoding)

    def _read_file(self, file_path: Path) -> dict[str, Any]:
        """Load config.yml with `${VAR}` references expanded, from the environment or `.env`.

        A missing file is an empty configuration.
        """
        if Path(file_path).exists():
            return dict(envyaml.EnvYAML(file_path, self.env_file, flatten=False))
        return {}


class GoesCtlSettings(BaseSettings):
    """Settings read from init kwargs, `GOESCTL_*` variables, `.env` and `config.yml`, in this order.

    Sections:
        download: keyword arguments for the HTTP downloader (timeout, chunk_size, ...)
        imagery: satellite and size of the requested images
        pipeline: default stride and concurrency for the `download` command
    """

    model_config = SettingsConfigDict(
        yaml_file="config.yml",
        env_file=".env",
        env_prefix="GOESCTL_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    download: dict[str, Any] = Field(default_factory=dict)
    imagery: dict[str, Any] = Field(default_factory=dict)
    pipeline: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # config.yml ranks below the environment, so GOESCTL_* variables override it
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            EnvYamlConfigSettingsSource(settings_cls),
            file_secret_settings,
        )


_instance: GoesCtlSettings | None = None


def get_settings(**kwargs: Any) -> GoesCtlSettings:
    """Settings shared by the whole process, loaded on first use (`kwargs` only count then)."""
    global _instance
    if _instance is None:
        _instance = GoesCtlSettings(**kwargs)
    return _instance


def reset_settings() -> None:
    """Drop the cached settings, the next `get_settings()` reads them again."""
    global _instance
    _instance = None

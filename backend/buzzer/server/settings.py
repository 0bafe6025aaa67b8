"""Score tracker configuration via environment variables."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from shared.validators import ListEnvSettingsSource, parse_int_list, parse_string_list

if TYPE_CHECKING:
    from pydantic_settings.sources.base import PydanticBaseSettingsSource


class BuzzerSettings(BaseSettings):
    model_config = {"env_prefix": "BUZZER_"}

    # point values a reader may award by typing the number
    accepted_points: list[int] = [-5, 0, 10, 15, 20]
    # custom emoji names that count as a buzz, e.g. "buzz" matches "<:buzz:1234>"
    buzz_emojis: list[str] = []
    max_games: int = Field(default=1000, ge=1)
    log_dir: str = Field(default="backend/logs/buzzer", min_length=1)

    @field_validator("accepted_points", mode="before")
    @classmethod
    def validate_accepted_points(cls, v: str | list[int] | list[str]) -> list[int]:
        return parse_int_list(v)

    @field_validator("buzz_emojis", mode="before")
    @classmethod
    def validate_buzz_emojis(cls, v: str | list[str]) -> list[str]:
        return parse_string_list(v, allow_empty=True)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return init_settings, ListEnvSettingsSource(settings_cls), dotenv_settings, file_secret_settings

import tomllib
from pathlib import Path
from typing import Annotated

import pydantic
import tomlkit
from eth_typing import ChecksumAddress
from pydantic import (
    AfterValidator,
    BaseModel,
    Field,
    HttpUrl,
    PlainSerializer,
    WebsocketUrl,
    field_validator,
)
from pydantic_settings import BaseSettings, SettingsConfigDict

from arbscan.checksum_cache import get_checksum_address
from arbscan.constants import MAX_BASIS_POINTS
from arbscan.exceptions import ConfigurationError
from arbscan.logging import logger

CONFIG_DIR = Path.home() / ".config" / "arbscan"
CONFIG_FILE = CONFIG_DIR / "config.toml"
ENV_PREFIX = "ARBSCAN_"

Address = Annotated[str, AfterValidator(get_checksum_address)]


class PairConfig(BaseModel):
    """
    A monitored pool, with the pools that share its base token.
    """

    address: Address
    base_token: Address
    quote_token: Address
    related_pairs: list[Address] = Field(default_factory=list)

    @field_validator("related_pairs", mode="after")
    def validate_related_pairs(
        cls,  # noqa: N805
        related_pairs: list[ChecksumAddress],
    ) -> list[ChecksumAddress]:
        """
        Remove duplicates, keeping the first occurrence.
        """

        return list(dict.fromkeys(related_pairs))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX)

    # Serialize file paths as a string representation of the absolute path
    rpc: Annotated[
        HttpUrl | WebsocketUrl | Path,
        PlainSerializer(lambda endpoint: str(endpoint), return_type=str),
    ]
    router_address: Address
    executor_address: Address
    poll_interval: float = Field(default=2.0, gt=0)
    slippage_bps: int = Field(default=50, ge=0, lt=MAX_BASIS_POINTS)
    pairs: list[PairConfig] = Field(default_factory=list)

    @field_validator("rpc", mode="after")
    def validate_path(
        cls,  # noqa: N805
        endpoint: HttpUrl | WebsocketUrl | Path,
    ) -> HttpUrl | WebsocketUrl | Path:
        """
        Validate the endpoint.

        This will convert a file path to an absolute reference, leaving HTTP and WS URLs as-is.
        """

        return endpoint.expanduser().absolute() if isinstance(endpoint, Path) else endpoint


def load_config_from_file(config_path: Path) -> Settings:
    """
    Load and validate the settings in a TOML file. Values missing from the file are read from
    environment variables with the `ARBSCAN_` prefix, e.g. `ARBSCAN_RPC`.
    """

    try:
        contents = tomllib.loads(config_path.read_text())
    except OSError as exc:
        raise ConfigurationError(message=f"Could not read config file {config_path}.") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(message=f"Config file {config_path} is not valid TOML.") from exc

    try:
        return Settings(**contents)
    except pydantic.ValidationError as exc:
        raise ConfigurationError(
            message=f"Config file {config_path} is invalid: {exc.error_count()} errors\n{exc}"
        ) from exc


def save_config_to_file(config: Settings, config_path: Path = CONFIG_FILE) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(
        tomlkit.dumps(
            config.model_dump(mode="json"),
        ),
    )
    logger.info(f"Saved configuration to {config_path}.")

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import msgspec
import msgspec.json
import msgspec.toml

from stagepath._paths import UserPath
from stagepath.constants import (
    DEFAULT_EXT_PREFIX,
    DEFAULT_ID_SEED,
    DEFAULT_STAGING_DIR,
    EXECUTION_ID_PREFIX,
    RENAME_UNSAFE_SCHEMES,
)
from stagepath.errors import ConfigError

_DECODERS = {
    ".json": msgspec.json.decode,
    ".toml": msgspec.toml.decode,
}


class StagingConfig(msgspec.Struct, frozen=True, forbid_unknown_fields=True):
    """Per-allocator settings, fixed at construction."""

    staging_dir: str = DEFAULT_STAGING_DIR
    inherit_perms: bool = False
    ext_prefix: str = DEFAULT_EXT_PREFIX
    rename_unsafe_schemes: tuple[str, ...] = RENAME_UNSAFE_SCHEMES
    execution_id_prefix: str = EXECUTION_ID_PREFIX
    id_seed: int = DEFAULT_ID_SEED

    def __post_init__(self) -> None:
        name = self.staging_dir
        if not name or "/" in name or "\\" in name or name in (".", ".."):
            raise ConfigError(
                f"staging_dir must be a single relative path segment, got {name!r}"
            )
        if not self.ext_prefix or "/" in self.ext_prefix:
            raise ConfigError(f"ext_prefix must be a non-empty name, got {self.ext_prefix!r}")
        if self.id_seed < 0:
            raise ConfigError(f"id_seed must be >= 0, got {self.id_seed}")

    def evolve(self, **changes: Any) -> StagingConfig:
        return msgspec.structs.replace(self, **changes)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> StagingConfig:
        try:
            return msgspec.convert(dict(data), type=cls)
        except msgspec.ValidationError as e:
            raise ConfigError("Invalid staging configuration", e) from e

    @classmethod
    def load(cls, path: UserPath) -> StagingConfig:
        """Load a config file (.toml or .json)."""
        p = Path(path)
        decode = _DECODERS.get(p.suffix.lower())
        if decode is None:
            raise ConfigError(f"Unsupported config format {p.suffix!r} for {p}")
        try:
            data = p.read_bytes()
        except OSError as e:
            raise ConfigError(f"Cannot read staging configuration {p}", e) from e
        try:
            return decode(data, type=cls)
        except (msgspec.DecodeError, msgspec.ValidationError) as e:
            raise ConfigError(f"Invalid staging configuration {p}", e) from e

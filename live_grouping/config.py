"""Configuration management for live-grouping."""

from dataclasses import dataclass, field
from pathlib import Path

from live_grouping.exceptions import ConfigurationError, ValidationError
from live_grouping.models import GlobalUnitDefaults


@dataclass
class StorageConfig:
    """JSON document backend configuration."""

    data_dir: Path = field(default_factory=lambda: Path("data"))
    pretty_json: bool = False


@dataclass
class MediaConfig:
    """Local media store configuration."""

    media_dir: Path = field(default_factory=lambda: Path("media"))
    base_url: str = "/media"


@dataclass
class LiveGroupingConfig:
    """Main configuration for live-grouping."""

    storage: StorageConfig = field(default_factory=StorageConfig)
    media: MediaConfig = field(default_factory=MediaConfig)
    unit_defaults: GlobalUnitDefaults = field(default_factory=GlobalUnitDefaults)
    seed: int | None = None
    log_level: str = "INFO"
    locale: str = "en_IN"

    @classmethod
    def from_env(cls) -> "LiveGroupingConfig":
        """Create config from environment variables."""
        import os

        storage = StorageConfig(
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        media = MediaConfig(
            media_dir=Path(os.getenv("MEDIA_DIR", "media")),
            base_url=os.getenv("MEDIA_BASE_URL", "/media"),
        )

        base = GlobalUnitDefaults()
        try:
            unit_defaults = GlobalUnitDefaults(
                unit_type=os.getenv("UNIT_DEFAULT_TYPE", base.unit_type),
                area=os.getenv("UNIT_DEFAULT_AREA", base.area),
                carpet_area=os.getenv("UNIT_DEFAULT_CARPET_AREA", base.carpet_area),
                base_rate=os.getenv("UNIT_DEFAULT_BASE_RATE", base.base_rate),
                discount_rate=os.getenv("UNIT_DEFAULT_DISCOUNT_RATE", base.discount_rate),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValidationError, ValueError) as exc:
            raise ConfigurationError(f"Invalid environment configuration: {exc}") from exc

        return cls(
            storage=storage,
            media=media,
            unit_defaults=unit_defaults,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            locale=os.getenv("LOCALE", "en_IN"),
        )

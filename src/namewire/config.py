from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class InjectorSettings(BaseSettings):
    """Injector configuration, read from ``NAMEWIRE_*`` environment variables.

    Attributes:
        base_path: Directory that relative paths given to ``resolve_path`` and
            ``register_path`` are resolved against.
        export_attribute: Module attribute holding a loaded file's export.
        unwrap_underscores: Whether ``_name_`` resolves as ``name``.
    """

    base_path: Path = Field(default_factory=Path.cwd, description="Base directory for relative paths.")
    export_attribute: str = Field(default="__export__", description="Module attribute holding the export.")
    unwrap_underscores: bool = Field(default=True, description="Resolve _name_ as name.")

    model_config = SettingsConfigDict(env_prefix="NAMEWIRE_", case_sensitive=False)

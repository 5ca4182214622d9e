"""
Runtime configuration for the documentation registry.

Settings are environment-driven (prefix ``DOCS_REGISTRY_``), validated once
at construction and immutable afterwards. Configuration never changes the
outcome of an audit for a given corpus snapshot; it only selects where the
corpus lives and which digest and header template new output uses.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Annotated, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


ChecksumAlgorithm = Literal["sha256", "sha512"]


class RegistrySettings(BaseSettings):
    """
    Registry settings parsed from the environment.

    Fails fast if a configured template directory does not exist, so that
    generation never starts with a header template it cannot load.
    """

    # ---------------------------------------------------------------------
    # Corpus location
    # ---------------------------------------------------------------------

    docs_dir: Annotated[
        Path,
        Field(
            default=Path("docs"),
            description="Root directory of the document corpus",
        ),
    ]

    index_filename: Annotated[
        str,
        Field(
            default="INDEX.md",
            min_length=1,
            description="Master index file name, relative to docs_dir",
        ),
    ]

    # ---------------------------------------------------------------------
    # Integrity
    # ---------------------------------------------------------------------

    checksum_algorithm: Annotated[
        ChecksumAlgorithm,
        Field(
            default="sha256",
            description=(
                "Digest used when the generator writes a new checksum. "
                "Audits infer the algorithm from the stored digest length."
            ),
        ),
    ]

    # ---------------------------------------------------------------------
    # Rendering
    # ---------------------------------------------------------------------

    templates_dir: Annotated[
        Optional[Path],
        Field(
            default=None,
            description=(
                "Directory holding a custom header.md.jinja. "
                "Defaults to the template bundled with the package."
            ),
        ),
    ]

    # ---------------------------------------------------------------------
    # Operational
    # ---------------------------------------------------------------------

    log_level: Annotated[
        str,
        Field(
            default="INFO",
            description="Log level applied by the CLI and MCP entrypoints",
        ),
    ]

    @field_validator("templates_dir")
    @classmethod
    def templates_dir_must_exist(cls, v: Optional[Path]) -> Optional[Path]:
        if v is not None and not v.is_dir():
            raise ValueError(f"Configured templates_dir is not a directory: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in allowed:
            raise ValueError(
                f"Unsupported log_level '{v}'. Allowed values: {sorted(allowed)}"
            )
        return level

    model_config = SettingsConfigDict(
        env_prefix="DOCS_REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
        frozen=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> RegistrySettings:
    """
    Settings provider for entrypoints (CLI, MCP connector).

    Core operations never call this; they take settings explicitly.
    """
    return RegistrySettings()

"""
InstallerSettings — everything the installer can be told via installer.yml.

Defaults install the pinned InvokeAI release this bundle was built for.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from mlinstall.core.data import DATA_DIR

DEFAULT_ARCHIVE_URL = "https://github.com/invoke-ai/InvokeAI/archive/refs/tags/{version}.zip"


def _default_troubleshooting() -> dict[str, str]:
    return {
        "linux": "https://invoke-ai.github.io/InvokeAI/installation/INSTALL_LINUX/",
        "osx": "https://invoke-ai.github.io/InvokeAI/installation/INSTALL_MAC/",
    }


class InstallerSettings(BaseModel):
    """Installer configuration, validated from installer.yml."""

    model_config = ConfigDict(frozen=True)

    app_name: str = "InvokeAI"
    app_version: str = "v2.2.4"
    archive_url: str = DEFAULT_ARCHIVE_URL

    default_root_name: str = "invokeai"
    minimum_python: str = "3.9.0"
    python_candidates: list[str] = Field(
        default_factory=lambda: ["python3.11", "python3.10", "python3.9", "python3", "python"]
    )

    # the application's configuration entry point; a module wins over a script
    configure_script: str | None = "configure_invokeai.py"
    configure_module: str | None = None
    source_dir: str = str(DATA_DIR)
    troubleshooting: dict[str, str] = Field(default_factory=_default_troubleshooting)
    pip_timeout: int = 3600

    @field_validator("python_candidates")
    @classmethod
    def _require_candidates(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("python_candidates must name at least one interpreter")
        return v

    @field_validator("minimum_python")
    @classmethod
    def _numeric_version(cls, v: str) -> str:
        parts = v.split(".")
        if not all(p.isdigit() for p in parts) or len(parts) > 4:
            raise ValueError(f"minimum_python must look like '3.9.0', got {v!r}")
        return v

    @model_validator(mode="after")
    def _require_configure_entry(self) -> InstallerSettings:
        if not (self.configure_module or self.configure_script):
            raise ValueError("one of configure_module or configure_script is required")
        return self

    @property
    def resolved_archive_url(self) -> str:
        """The archive URL with the pinned version filled in."""
        return self.archive_url.format(version=self.app_version)

    def troubleshooting_url(self, os_family: str | None) -> str:
        """Troubleshooting page for an OS family (empty when unknown)."""
        if not os_family:
            return ""
        return self.troubleshooting.get(os_family, "")

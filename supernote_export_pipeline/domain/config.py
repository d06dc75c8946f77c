"""
Configuration dataclasses for the Supernote Export Pipeline.

This module defines type-safe configuration schemas using Python dataclasses.
These schemas are registered with Hydra to enable validation and IDE autocomplete
support for configuration values. Output and text-processing settings are frozen:
they are immutable for the duration of an export.
"""

from dataclasses import dataclass, field

from hydra.core.config_store import ConfigStore

from supernote_export_pipeline.domain.models import ArtifactKind, ExportMode


class ConfigError(Exception):
    """Configuration error for the Supernote Export Pipeline.

    Raised when configuration values are invalid or inconsistent. Using a
    dedicated exception type makes it easier to distinguish configuration
    problems from other runtime errors.
    """


def _validate_vault_relative(name: str, value: str) -> None:
    if value is None:
        raise ConfigError(f"{name} must be a string (use '' for the vault root)")
    stripped = value.strip()
    if stripped.startswith("~") or (len(stripped) > 1 and stripped[1] == ":"):
        raise ConfigError(
            f"{name} must be a vault-relative folder, got {value!r}. "
            "Use a path such as '_assets/supernote/images'."
        )
    if ".." in stripped.replace("\\", "/").split("/"):
        raise ConfigError(f"{name} must not contain '..' segments, got {value!r}")


@dataclass(frozen=True)
class OutputConfig:
    """Destination folders for exported artifacts.

    All paths are relative to the vault root. An empty string means the vault
    root for Markdown, and "let the host pick the attachment location" for
    images and PDFs.
    """

    markdown_path: str = ""
    """Base folder for Markdown transcripts."""

    images_path: str = "_assets/supernote/images"
    """Base folder for page images."""

    pdf_path: str = "_assets/supernote/pdf"
    """Base folder for PDF exports."""

    use_note_categorization: bool = False
    """Whether to route Markdown transcripts by filename. When False, the
    per-kind base path is used verbatim regardless of filename."""

    daily_note_pattern: str = "YYYYMMDD-HHMMSS"
    """Date template a filename must match to count as a daily note. The
    default is the Supernote device's own naming scheme."""

    daily_note_output_folder: str = "Daily Notes"
    """Markdown destination for daily notes when categorization is enabled."""

    concept_note_output_folder: str = ""
    """Markdown destination for all other notes when categorization is
    enabled. Empty means the vault root."""

    def __post_init__(self) -> None:
        """Validate that every folder is vault-relative."""
        for name in (
            "markdown_path",
            "images_path",
            "pdf_path",
            "daily_note_output_folder",
            "concept_note_output_folder",
        ):
            _validate_vault_relative(name, getattr(self, name))

    def base_path(self, kind: ArtifactKind) -> str:
        """Configured base folder for ``kind``."""
        if kind is ArtifactKind.MARKDOWN:
            return self.markdown_path
        if kind is ArtifactKind.IMAGE:
            return self.images_path
        return self.pdf_path


@dataclass(frozen=True)
class DictionaryConfig:
    """Custom dictionary applied to recognized text.

    Handwriting recognition tends to make the same mistakes repeatedly; the
    dictionary maps recognized strings to their intended spelling.
    """

    enabled: bool = False
    """Whether the dictionary pass runs at all."""

    entries: dict[str, str] = field(default_factory=dict)
    """Mapping of recognized text to replacement text."""

    def __post_init__(self) -> None:
        """Validate that no entry has an empty key."""
        for key in self.entries:
            if not key:
                raise ConfigError("dictionary entries must not have empty keys")


@dataclass(frozen=True)
class DisplayConfig:
    """How generated Markdown references other files."""

    invert_colors_when_dark: bool = True
    """Append the ``#supernote-invert-dark`` subpath to image embeds so a
    CSS snippet can invert page images in dark themes."""

    link_style: str = "wikilink"
    """Link syntax. Options: 'wikilink' ([[path]]) or 'markdown' ([name](path))."""

    def __post_init__(self) -> None:
        """Validate link style."""
        if self.link_style not in ("wikilink", "markdown"):
            raise ConfigError(
                f"link_style must be 'wikilink' or 'markdown', got {self.link_style!r}"
            )


@dataclass
class VaultConfig:
    """Local vault that acts as the storage host."""

    root: str = "."
    """Filesystem path of the vault root."""

    attachment_folder: str = ""
    """Vault-relative folder where the host places attachments when no custom
    path is configured. Empty means the vault root."""

    def __post_init__(self) -> None:
        """Validate that the vault root is set."""
        if not self.root or not self.root.strip():
            raise ConfigError(
                "vault.root is required and cannot be empty. "
                "Point it at the folder that contains your notes."
            )
        _validate_vault_relative("attachment_folder", self.attachment_folder)


@dataclass
class ExportJobConfig:
    """What to export in this run."""

    source: str = ""
    """Vault-relative path of the ``.note`` file to export."""

    mode: str = "markdown"
    """Export mode. Options: 'markdown', 'markdown_with_images', 'pdf'"""

    pages: list[int] = field(default_factory=list)
    """1-based pages to rasterize. Empty means all pages in order."""

    rasterizer: str = "supernote"
    """Page renderer. Options: 'supernote' (supernotelib) or 'placeholder'
    (1x1 transparent PNG per page, useful for dry layout checks)."""

    dry_run: bool = False
    """Preview destinations without decoding or writing anything."""

    def __post_init__(self) -> None:
        """Validate mode, rasterizer and page numbers."""
        try:
            ExportMode.from_string(self.mode)
        except ValueError as e:
            raise ConfigError(str(e)) from e
        if self.rasterizer not in ("supernote", "placeholder"):
            raise ConfigError(
                f"rasterizer must be 'supernote' or 'placeholder', "
                f"got {self.rasterizer!r}"
            )
        for page in self.pages:
            if page < 1:
                raise ConfigError(f"pages must be 1-based, got {page}")

    @property
    def export_mode(self) -> ExportMode:
        return ExportMode.from_string(self.mode)


@dataclass
class AppConfig:
    """Top-level application configuration.

    Combines all configuration groups into a single type-safe configuration
    object. This is the configuration class that Hydra will instantiate and
    pass to the main function.
    """

    vault: VaultConfig = field(default_factory=VaultConfig)
    """Storage host configuration."""

    output: OutputConfig = field(default_factory=OutputConfig)
    """Destination folders and categorization."""

    dictionary: DictionaryConfig = field(default_factory=DictionaryConfig)
    """Recognized-text dictionary."""

    display: DisplayConfig = field(default_factory=DisplayConfig)
    """Link rendering options."""

    export: ExportJobConfig = field(default_factory=ExportJobConfig)
    """The export to run."""


def register_configs() -> None:
    """Register structured configs with Hydra.

    This function must be called before Hydra initializes to enable type-safe
    configuration validation and IDE autocomplete support.
    """
    cs = ConfigStore.instance()

    cs.store(group="vault", name="default", node=VaultConfig)
    cs.store(group="output", name="default", node=OutputConfig)
    cs.store(group="dictionary", name="default", node=DictionaryConfig)
    cs.store(group="display", name="default", node=DisplayConfig)
    cs.store(group="export", name="default", node=ExportJobConfig)

    cs.store(name="app_config", node=AppConfig)

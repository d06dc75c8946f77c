"""Main entry point for the Supernote Export Pipeline."""

import logging
import sys

import hydra
from omegaconf import DictConfig, OmegaConf

from supernote_export_pipeline.cli.commands import dry_run_command, export_command
from supernote_export_pipeline.clients.decoder import SupernoteDecoder
from supernote_export_pipeline.clients.exceptions import ExportPipelineError
from supernote_export_pipeline.clients.rasterizer import (
    PlaceholderRasterizer,
    Rasterizer,
    SupernoteRasterizer,
)
from supernote_export_pipeline.clients.storage import LocalVaultStorage
from supernote_export_pipeline.domain.config import (
    AppConfig,
    ConfigError,
    DictionaryConfig,
    DisplayConfig,
    ExportJobConfig,
    OutputConfig,
    VaultConfig,
    register_configs,
)
from supernote_export_pipeline.orchestration.exporter import (
    ExportContext,
    NoteExporter,
)
from supernote_export_pipeline.utils.logging import setup_logging


def build_app_config(cfg: DictConfig) -> AppConfig:
    """Convert the Hydra DictConfig into the structured AppConfig.

    Every group is converted to a plain container first so the dataclass
    ``__post_init__`` validation runs on ordinary Python values.

    Raises:
        ConfigError: If any configuration value is invalid.
    """

    def section(name: str) -> dict:
        node = cfg.get(name)
        if node is None:
            return {}
        return OmegaConf.to_container(node, resolve=True)  # type: ignore[return-value]

    return AppConfig(
        vault=VaultConfig(**section("vault")),
        output=OutputConfig(**section("output")),
        dictionary=DictionaryConfig(**section("dictionary")),
        display=DisplayConfig(**section("display")),
        export=ExportJobConfig(**section("export")),
    )


def validate_job(cfg: AppConfig) -> None:
    """Validate that the job names a ``.note`` file to export.

    Raises:
        ConfigError: If no source is configured or it is not a ``.note`` file.
    """
    source = cfg.export.source.strip()
    if not source:
        raise ConfigError(
            "export.source is required. "
            "Set export.source=<vault-relative path to a .note file>."
        )
    if not source.lower().endswith(".note"):
        raise ConfigError(f"export.source must be a .note file, got {source!r}")


def initialize_exporter(
    cfg: AppConfig, logger: logging.Logger
) -> tuple[NoteExporter, LocalVaultStorage]:
    """Initialize storage, decoder, rasterizer and the exporter.

    Args:
        cfg: Application configuration object
        logger: Logger instance

    Returns:
        Tuple of (exporter, storage)
    """
    storage = LocalVaultStorage(cfg.vault.root, cfg.vault.attachment_folder)
    logger.info(f"Vault: {storage.root}")

    rasterizer_factory: type[Rasterizer]
    if cfg.export.rasterizer == "placeholder":
        logger.warning("Using placeholder rasterizer: page images will be blank")
        rasterizer_factory = PlaceholderRasterizer
    else:
        rasterizer_factory = SupernoteRasterizer

    context = ExportContext(
        storage=storage,
        decoder=SupernoteDecoder(),
        rasterizer_factory=rasterizer_factory,
        output=cfg.output,
        dictionary=cfg.dictionary,
        display=cfg.display,
    )
    return NoteExporter(context), storage


@hydra.main(version_base=None, config_path="conf", config_name="config")
def main(cfg: DictConfig) -> int:
    """Main entry point for the pipeline.

    Args:
        cfg: Hydra configuration object

    Returns:
        Exit code: 0 for success, 1 for partial failure, 2 for complete
        failure, 3 for configuration or fatal errors
    """
    # Register structured configs with Hydra
    register_configs()

    # Setup logging
    logger = setup_logging()

    try:
        app_cfg = build_app_config(cfg)
        validate_job(app_cfg)

        exporter, storage = initialize_exporter(app_cfg, logger)

        # Route to appropriate command based on dry_run flag
        if app_cfg.export.dry_run:
            exit_code = dry_run_command(app_cfg, logger, exporter)
        else:
            exit_code = export_command(app_cfg, logger, exporter, storage)

        return exit_code

    except ConfigError as e:
        logger.error(f"Configuration error: {e}")
        return 3
    except ExportPipelineError as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 3
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        return 3


if __name__ == "__main__":
    sys.exit(main())  # type: ignore[call-arg]

from __future__ import annotations

from omegaconf import OmegaConf
import pytest

from supernote_export_pipeline.domain.config import (
    ConfigError,
    DisplayConfig,
    ExportJobConfig,
    OutputConfig,
    VaultConfig,
)
from supernote_export_pipeline.domain.models import ArtifactKind, ExportMode

from main import build_app_config, validate_job


def test_output_defaults() -> None:
    config = OutputConfig()

    assert config.base_path(ArtifactKind.MARKDOWN) == ""
    assert config.base_path(ArtifactKind.IMAGE) == "_assets/supernote/images"
    assert config.base_path(ArtifactKind.PDF) == "_assets/supernote/pdf"
    assert config.daily_note_pattern == "YYYYMMDD-HHMMSS"


@pytest.mark.parametrize("folder", ["~/notes", "C:/notes", "a/../b"])
def test_output_rejects_non_vault_folders(folder: str) -> None:
    with pytest.raises(ConfigError):
        OutputConfig(pdf_path=folder)


def test_display_rejects_unknown_link_style() -> None:
    with pytest.raises(ConfigError):
        DisplayConfig(link_style="html")


def test_vault_root_is_required() -> None:
    with pytest.raises(ConfigError):
        VaultConfig(root=" ")


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("markdown", ExportMode.MARKDOWN),
        ("markdown-with-images", ExportMode.MARKDOWN_WITH_IMAGES),
        ("PDF", ExportMode.PDF),
    ],
)
def test_export_mode_parsing(raw: str, expected: ExportMode) -> None:
    assert ExportJobConfig(mode=raw).export_mode is expected


def test_export_job_validation() -> None:
    with pytest.raises(ConfigError):
        ExportJobConfig(mode="docx")
    with pytest.raises(ConfigError):
        ExportJobConfig(rasterizer="gpu")
    with pytest.raises(ConfigError):
        ExportJobConfig(pages=[0])


def test_build_app_config_from_dictconfig() -> None:
    cfg = OmegaConf.create(
        {
            "vault": {"root": "/tmp/vault"},
            "output": {"use_note_categorization": True, "daily_note_output_folder": "Journal"},
            "dictionary": {"enabled": True, "entries": {"teh": "the"}},
            "export": {"source": "a.note", "mode": "pdf", "pages": [2, 1]},
        }
    )

    app = build_app_config(cfg)

    assert app.vault.root == "/tmp/vault"
    assert app.output.daily_note_output_folder == "Journal"
    assert app.output.pdf_path == "_assets/supernote/pdf"
    assert app.dictionary.entries == {"teh": "the"}
    assert app.display.link_style == "wikilink"
    assert app.export.export_mode is ExportMode.PDF
    assert app.export.pages == [2, 1]


def test_validate_job_requires_note_source() -> None:
    app = build_app_config(OmegaConf.create({"export": {"source": ""}}))
    with pytest.raises(ConfigError):
        validate_job(app)

    app = build_app_config(OmegaConf.create({"export": {"source": "a.pdf"}}))
    with pytest.raises(ConfigError):
        validate_job(app)

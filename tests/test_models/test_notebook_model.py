"""Tests for the notebook and settings models."""

import pytest
from pydantic import ValidationError

from nbscrub.models import (
    DEFAULT_EXTRA_KEYS,
    CodeCell,
    ExtraKey,
    MarkdownCell,
    Notebook,
    RawCell,
    Settings,
)


class TestNotebookModel:
    """Tests for Notebook and the cell union."""

    def test_cells_dispatch_on_cell_type(self, messy_notebook):
        """Test each cell becomes the model matching its cell_type."""
        kinds = [type(cell) for cell in messy_notebook.cells]
        assert kinds == [MarkdownCell, CodeCell, CodeCell, CodeCell, RawCell, CodeCell, CodeCell]

    def test_unknown_cell_type_rejected(self):
        """Test that an unknown cell type fails validation."""
        with pytest.raises(ValidationError):
            Notebook.model_validate(
                {"cells": [{"cell_type": "heading", "source": ""}], "metadata": {}, "nbformat": 4, "nbformat_minor": 4}
            )

    def test_source_forms_preserved(self, messy_notebook):
        """Test string and list sources are kept as given."""
        assert isinstance(messy_notebook.cells[0].source, list)
        assert isinstance(messy_notebook.cells[1].source, str)

    def test_missing_id_not_serialized(self, messy_notebook):
        """Test that an absent id is omitted rather than written as null."""
        dumped = messy_notebook.model_dump()
        assert "id" not in dumped["cells"][6]
        assert dumped["cells"][3]["execution_count"] is None

    def test_key_order_matches_nbformat(self, messy_notebook):
        """Test serialized keys come out in nbformat's canonical order."""
        dumped = messy_notebook.model_dump()
        assert list(dumped) == ["cells", "metadata", "nbformat", "nbformat_minor"]
        assert list(dumped["cells"][1]) == [
            "cell_type",
            "execution_count",
            "id",
            "metadata",
            "outputs",
            "source",
        ]

    def test_unknown_keys_preserved(self):
        """Test extra keys survive a round trip."""
        nb = Notebook.model_validate(
            {
                "cells": [{"cell_type": "markdown", "metadata": {}, "source": "", "custom": 1}],
                "metadata": {},
                "nbformat": 4,
                "nbformat_minor": 4,
                "extra_top": "kept",
            }
        )
        dumped = nb.model_dump()
        assert dumped["extra_top"] == "kept"
        assert dumped["cells"][0]["custom"] == 1


class TestSettings:
    """Tests for the Settings model."""

    def test_defaults(self):
        """Test default policy values."""
        settings = Settings()
        assert settings.drop_output
        assert settings.drop_count
        assert not settings.drop_empty_cells
        assert settings.extra_keys == DEFAULT_EXTRA_KEYS

    def test_frozen(self):
        """Test settings cannot be modified."""
        settings = Settings()
        with pytest.raises(ValidationError):
            settings.drop_output = False

    def test_strip_keys_adds_kernel_info(self):
        """Test kernel info keys are appended when requested."""
        keys = Settings(strip_kernel_info=True).strip_keys
        assert ExtraKey.parse("metadata.kernelspec") in keys
        assert ExtraKey.parse("metadata.language_info.version") in keys
        assert keys[: len(DEFAULT_EXTRA_KEYS)] == DEFAULT_EXTRA_KEYS

    def test_strip_keys_deduplicates(self):
        """Test a kernel info key already configured appears once."""
        kernelspec = ExtraKey.parse("metadata.kernelspec")
        settings = Settings(extra_keys=(kernelspec,), strip_kernel_info=True)
        assert settings.strip_keys.count(kernelspec) == 1

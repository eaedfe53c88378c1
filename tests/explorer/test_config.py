"""Tests for ExplorerConfig."""

from __future__ import annotations

import pytest

from fhir_profile_core.exceptions import ConfigurationError
from fhir_profile_core.explorer import ExplorerConfig, TreeRoot, TreeStore


class TestExplorerConfig:
    def test_defaults(self) -> None:
        config = ExplorerConfig()
        assert config.default_root is TreeRoot.SD
        assert config.projection_cache_size == 64
        assert config.validate_paths is True

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_cache_size(self, size: int) -> None:
        with pytest.raises(ConfigurationError, match="projection_cache_size"):
            ExplorerConfig(projection_cache_size=size)

    def test_store_uses_default_config(self) -> None:
        store = TreeStore()
        assert store.state.project_id is None

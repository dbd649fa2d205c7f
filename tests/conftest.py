"""Shared fixtures for mermend tests."""

from pathlib import Path

import pytest

from mermend.ui import reset_theme


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the platform config dir at a temporary directory."""
    config_home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.delenv("MERMEND_THEME", raising=False)
    monkeypatch.delenv("COLORFGBG", raising=False)
    reset_theme()
    yield config_home / "mermend"
    reset_theme()


@pytest.fixture
def sample_config_dict() -> dict:
    """Sample configuration as it would appear in config.yaml."""
    return {
        "version": "1",
        "log_level": "INFO",
        "repair": {
            "edge_label_passes": 2,
            "node_passes": 3,
            "quote_reserved_chars": True,
            "regex_timeout": 1.0,
        },
        "output": {
            "theme": "dark",
            "show_diff": True,
            "backup": False,
        },
    }


@pytest.fixture
def broken_flowchart() -> str:
    """A flowchart that needs several kinds of repair."""
    return "\n".join(
        [
            "graph TD",
            "    A(Hello (World)) --> B[Check]:(note):::warn",
            "    B -->|Yes] C{Done?}",
            "    C -->|Retry (1)| A",
            "end",
        ]
    )

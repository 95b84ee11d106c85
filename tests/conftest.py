"""Shared pytest fixtures for Ownerguard tests."""
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

SAMPLE_CODEOWNERS = """\
# Default owners for everything in the repo
*.js     @alice
*.ts     @bob @org/frontend

# Documentation
/docs/**/*.md   @carol
!docs/drafts/**

# Build tooling
build/**/*.mk   @dave
"""


@pytest.fixture
def sample_codeowners() -> str:
    """Rule file contents with comments, owners and a negation."""
    return SAMPLE_CODEOWNERS


@pytest.fixture
def codeowners_file(tmp_path: Path, sample_codeowners: str) -> Path:
    """Write the sample rule file under .github/ of a fake repository."""
    path = tmp_path / ".github" / "CODEOWNERS"
    path.parent.mkdir()
    path.write_text(sample_codeowners, encoding="utf-8")
    return path


@pytest.fixture
def sample_config(codeowners_file: Path) -> Dict[str, Any]:
    """Provide a sample Ownerguard configuration."""
    return {
        "ownerguard": {
            "codeowners_path": str(codeowners_file),
            "ignore_case": False,
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(tmp_path: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = tmp_path / "ownerguard.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path

"""Pytest configuration and fixtures for bumpwatch tests."""

import json
import tempfile
from collections.abc import Generator
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_package_json(temp_dir: Path) -> Path:
    """Create a sample package.json file."""
    content = {
        "name": "sample-project",
        "version": "1.0.0",
        "dependencies": {
            "lodash": "^4.17.21",
            "express": "~4.18.2",
            "https-proxy-agent": "^7.0.0",
            "http://example.com/tarball.tgz": "*",
        },
        "devDependencies": {
            "jest": "^29.7.0",
            "@types/node": "^20.0.0",
            "typescript": "5.4.5",
        },
    }
    file_path = temp_dir / "package.json"
    file_path.write_text(json.dumps(content, indent=2))
    return file_path


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample .bumpwatch.yml configuration file."""
    content = """version: 1

scanner:
  include_dev: false
  exclude_prefixes:
    - "@internal"

registry:
  timeout: 15

probe:
  default_branch: main
  retries: 2
"""
    file_path = temp_dir / ".bumpwatch.yml"
    file_path.write_text(content)
    return file_path


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove environment variables that override configuration."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("BUMPWATCH_NPM_COMMAND", raising=False)

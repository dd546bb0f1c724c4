"""Project path helpers based on pathlib."""

from pathlib import Path


def package_root() -> Path:
    """Return python package root directory."""
    return Path(__file__).resolve().parents[1]


def config_dir() -> Path:
    """Return Hydra config directory shipped inside the package."""
    return package_root() / "configs"

"""bumpwatch - spot breaking npm upgrades and find their changelogs."""

__version__ = "0.1.0"

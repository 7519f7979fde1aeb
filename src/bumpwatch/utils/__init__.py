"""Shared utilities for bumpwatch."""

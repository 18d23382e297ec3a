"""Run-level operations combining listing and manifest building."""

from .manifest_operations import build_manifest, new_builder, next_config_diff

__all__ = ["build_manifest", "new_builder", "next_config_diff"]

"""Manifest model and builder."""

from .builder import ManifestBuilder
from .models import Manifest, ObjectEntry, Partition

__all__ = ["Manifest", "ManifestBuilder", "ObjectEntry", "Partition"]

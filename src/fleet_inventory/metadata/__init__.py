"""
Metadata Inheritance

Regions, OUs and sites carry key/value metadata. Ancestors' metadata flows
down the hierarchy unless a nearer record already defines the key.
"""

from .resolver import MetadataInheritanceResolver, SiteInheritedMetadata, fold_inherited
from .validation import validate_metadata

__all__ = [
    "MetadataInheritanceResolver",
    "SiteInheritedMetadata",
    "fold_inherited",
    "validate_metadata",
]

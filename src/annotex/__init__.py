"""
Annotex: typed configuration extraction from Ingress annotations.
"""

from annotex.core.extractor import AnnotationExtractor, ExtractedAnnotations
from annotex.core.resolver import ConfigurationProvider, ManifestProvider
from annotex.models import Ingress, Resolved

__version__ = "0.1.0"

__all__ = [
    "AnnotationExtractor",
    "ExtractedAnnotations",
    "ConfigurationProvider",
    "ManifestProvider",
    "Ingress",
    "Resolved",
]

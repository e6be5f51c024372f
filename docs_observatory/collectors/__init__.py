"""Adapters that read the output of external collaborators."""

from docs_observatory.collectors.documentation import DocumentationMetricsSource, DocumentationSnapshot

__all__ = ["DocumentationMetricsSource", "DocumentationSnapshot"]

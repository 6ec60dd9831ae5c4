"""Concrete document surfaces."""

from .docx_surface import DocxDocumentSurface

__all__ = ["DocxDocumentSurface"]

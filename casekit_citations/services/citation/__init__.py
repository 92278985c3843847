"""Citation resolution services."""

from .resolver import CitationResolver, ResolutionStage
from .service import CitationService

__all__ = ["CitationResolver", "CitationService", "ResolutionStage"]

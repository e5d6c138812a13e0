from .extraction import IExtractor, IRefiner, Refinement
from .repository import IProfileRepository
from .synthesis import ISynthesisGenerator

__all__ = ["IExtractor", "IRefiner", "Refinement", "IProfileRepository", "ISynthesisGenerator"]

from .lexicon import LexiconRepository
from .students import StudentRepository

__all__ = ["LexiconRepository", "StudentRepository"]

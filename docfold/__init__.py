"""Document-aware cross-validation for BIO-tagged sequence labeling corpora."""

from .exceptions import ConfigurationError, CorpusFormatError, MalformedTagError

__version__ = "0.1.0"

__all__ = ["ConfigurationError", "CorpusFormatError", "MalformedTagError", "__version__"]

from wordclean.errors import ConfigurationError, WordlistWarning
from wordclean.services.variable_spelling import VariableSpelling, normalize

__all__ = ["ConfigurationError", "WordlistWarning", "VariableSpelling", "normalize"]

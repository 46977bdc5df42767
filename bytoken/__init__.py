from .bpe import ByToken
from .config import BPEConfig
from .errors import ByTokenError, ConfigurationError, SchemaError
from .vocab import INVALID_TOKEN, UNK_ID, UNK_TOKEN, Vocabulary

__all__ = [
    "ByToken",
    "BPEConfig",
    "Vocabulary",
    "ByTokenError",
    "ConfigurationError",
    "SchemaError",
    "UNK_TOKEN",
    "UNK_ID",
    "INVALID_TOKEN",
]

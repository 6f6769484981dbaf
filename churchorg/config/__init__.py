from .config import BaseConfig, StoreConfig, DEFAULT_CHORAL_NAME_KEYWORDS

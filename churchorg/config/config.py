"""
Config classes that read the environment, optionally seeded from a .env file.
"""
import os
from abc import abstractmethod
from typing import List, Optional
import logging
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_CHORAL_NAME_KEYWORDS = ("찬양", "성가", "choir", "praise")


class BaseConfig():
    """
    Config class that snapshots the environment, after loading a .env file if one exists.
    """
    def __init__(self):
        load_dotenv()
        # Get all environment variables and store them in a dictionary
        self.env_vars = {key: os.getenv(key) for key in os.environ}

    def get_env_vars(self) -> dict:
        """
        Return the dictionary containing all environment variables
        """
        return self.env_vars

    def get_env_var(self, var_name: str):
        """
        Retrieve the value of the specified environment variable
        Args:
            var_name (str) : Name of the env var to fetch 
        """
        if var_name in self.env_vars.keys():
            return self.env_vars[var_name]
        else:
            logger.warning("Variable %s not found.", var_name)
            return None

    def convert_var_into_list(self, var_name: str) -> bool:
        """
        Converts a comma-delimited var into a list
        """
        if var_name in self.env_vars.keys():
            self.env_vars[var_name] = self.get_var_as_list(var_name)
            return True
        logger.warning("Warning: var %s not found.", var_name)
        return False

    def get_var_as_list(self, var_name: str) -> Optional[List[str]]:
        """
        Returns a comma-delimited var as list, empty items dropped
        """
        if var_name in self.env_vars.keys():
            value = self.env_vars[var_name]
            if isinstance(value, list):
                return value
            return [env_var.strip() for env_var in (value or '').split(",") if env_var.strip()]
        logger.warning("Warning: var %s not found.", var_name)
        return None

    @abstractmethod
    def validate_env_vars(self):
        """
        Abstract method for validation of the env vars.
        """


class StoreConfig(BaseConfig):
    """
    Connection settings of the hosted store plus the statistics naming convention.

    SUPABASE_URL and SUPABASE_KEY are required; CHORAL_NAME_KEYWORDS optionally
    overrides the words that mark a committee as a musical one.
    """
    REQUIRED_VARS = ("SUPABASE_URL", "SUPABASE_KEY")

    def validate_env_vars(self):
        missing = [name for name in self.REQUIRED_VARS if not self.env_vars.get(name)]
        if missing:
            logger.error("Missing store settings: %s", ", ".join(missing))
            raise ValueError(f"Missing required environment variables: {', '.join(missing)}")

    @property
    def supabase_url(self) -> Optional[str]:
        return self.get_env_var("SUPABASE_URL")

    @property
    def supabase_key(self) -> Optional[str]:
        return self.get_env_var("SUPABASE_KEY")

    @property
    def choral_name_keywords(self) -> tuple:
        if not self.env_vars.get("CHORAL_NAME_KEYWORDS"):
            return DEFAULT_CHORAL_NAME_KEYWORDS
        return tuple(self.get_var_as_list("CHORAL_NAME_KEYWORDS"))

"""
Tests for the BaseConfig and StoreConfig classes from the config module
"""
import os

import pytest

from churchorg.config import DEFAULT_CHORAL_NAME_KEYWORDS, BaseConfig, StoreConfig


class DummyConfig(BaseConfig):
    def validate_env_vars(self):
        return True


@pytest.fixture
def _env_setup():
    """
    declare an environment
    """
    os.environ["VAR_1"] = "value1"
    os.environ["TO_LIST_VAR"] = "A, B,,C"
    os.environ["SUPABASE_URL"] = "https://example.supabase.co"
    os.environ["SUPABASE_KEY"] = "anon-key"
    yield
    for name in ("VAR_1", "TO_LIST_VAR", "SUPABASE_URL", "SUPABASE_KEY"):
        os.environ.pop(name, None)
    os.environ.pop("CHORAL_NAME_KEYWORDS", None)


def test_create_config(_env_setup):
    """
    Test retrieving the vars and asserting their values
    """
    config = DummyConfig()
    assert config.get_env_var("VAR_1") == "value1"
    assert config.get_env_vars()["VAR_1"] == "value1"
    assert config.get_env_var("NONEXISTENT_VAR") is None


def test_var_to_list(_env_setup):
    """
    Test converting a comma-delimited string into a list, dropping empty items
    """
    config = DummyConfig()
    assert config.convert_var_into_list("TO_LIST_VAR") is True
    assert config.get_env_var("TO_LIST_VAR") == ["A", "B", "C"]
    assert config.get_var_as_list("TO_LIST_VAR") == ["A", "B", "C"]


def test_var_to_list_missing(_env_setup):
    config = DummyConfig()
    assert config.convert_var_into_list("NONEXISTENT_VAR") is False
    assert config.get_var_as_list("NONEXISTENT_VAR") is None


def test_store_config(_env_setup):
    """
    Test that a complete environment validates and exposes the connection settings
    """
    config = StoreConfig()
    config.validate_env_vars()

    assert config.supabase_url == "https://example.supabase.co"
    assert config.supabase_key == "anon-key"
    assert config.choral_name_keywords == DEFAULT_CHORAL_NAME_KEYWORDS


def test_store_config_missing_key(_env_setup):
    """
    Test that every missing required variable is named in the error
    """
    del os.environ["SUPABASE_KEY"]
    config = StoreConfig()

    with pytest.raises(ValueError, match="SUPABASE_KEY"):
        config.validate_env_vars()


def test_choral_keywords_override(_env_setup):
    os.environ["CHORAL_NAME_KEYWORDS"] = "찬양, 성가대 ,worship"

    config = StoreConfig()

    assert config.choral_name_keywords == ("찬양", "성가대", "worship")

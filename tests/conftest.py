"""
Shared pytest fixtures for the nsresolve test suite.

Usage in tests:
    def test_something(cache_factory):
        cache_factory.add_fn("my.app", "start")
        resolver = cache_factory.resolver()

    def test_with_data(sample_resolver):
        # pre-populated with CacheFactory.create_sample_project()
        assert sample_resolver.resolve_var("my.app", "str/join") is not None
"""

import pytest
from tests.factories import CacheFactory


@pytest.fixture
def cache_factory():
    """Empty CacheFactory for fine-grained snapshots."""
    return CacheFactory()


@pytest.fixture
def sample_factory():
    """CacheFactory pre-populated with the sample project."""
    return CacheFactory().create_sample_project()


@pytest.fixture
def sample_resolver(sample_factory):
    """SymbolResolver over the sample project snapshot."""
    return sample_factory.resolver()


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """
    Point the user config at a temp directory and clear env overrides.

    Keeps ConfigManager from reading the developer's ~/.nsresolve.
    """
    from nsresolve.config import ConfigManager

    user_dir = tmp_path / "home" / ".nsresolve"
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_DIR", user_dir)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", user_dir / "config.yaml")
    for var in ("NSRESOLVE_FONT_LOCK", "NSRESOLVE_DIALECT", "NSRESOLVE_CACHE",
                "NSRESOLVE_ASCII_ONLY", "NSRESOLVE_UNICODE"):
        monkeypatch.delenv(var, raising=False)
    return user_dir

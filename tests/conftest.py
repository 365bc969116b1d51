"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from snapcards.collection.reducer import CollectionState
from snapcards.config import get_settings
from snapcards.core.models import Card, Folder
from snapcards.storage.kv import MemoryKeyValueStore
from snapcards.storage.storage_service import StorageService


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests (store + storage + study)")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


def make_card(card_id: str, front: str = "", back: str = "", **kwargs) -> Card:
    """Build a card with predictable defaults."""
    return Card(
        id=card_id,
        front=front or f"Question {card_id}",
        back=back or f"Answer {card_id}",
        created_at=kwargs.pop("created_at", 1_700_000_000_000),
        **kwargs,
    )


def make_folder(folder_id: str, name: str = "", color: str = "cyan") -> Folder:
    return Folder(id=folder_id, name=name or f"Folder {folder_id}", color=color, created_at=1_700_000_000_000)


@pytest.fixture
def sample_cards():
    """Three unfiled cards A, B, C."""
    return (make_card("A"), make_card("B"), make_card("C"))


@pytest.fixture
def sample_folder():
    return make_folder("F1", name="Biology")


@pytest.fixture
def loaded_state(sample_cards, sample_folder):
    """A state after the initial load."""
    return CollectionState(cards=sample_cards, folders=(sample_folder,), is_loading=False)


@pytest.fixture
def memory_kv():
    return MemoryKeyValueStore()


@pytest.fixture
def storage(memory_kv):
    return StorageService(memory_kv)


@pytest.fixture
def rng():
    """Seeded random source for reproducible shuffles."""
    return random.Random(1234)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary data directory."""
    monkeypatch.setenv("SNAPCARDS_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("SNAPCARDS_STORAGE_BACKEND", "file")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("SNAPCARDS_GEMINI_API_KEY", raising=False)
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def card_factory():
    return make_card


@pytest.fixture
def folder_factory():
    return make_folder

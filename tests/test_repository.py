import logging

import pytest

from spire_combat.core.repository import InMemoryRepository
from spire_combat.errors import NotFound
from spire_combat.loot import LootTable
from spire_combat.rewards import MonsterDefinition


def test_get_by_id_returns_none_for_unknown_or_empty():
    repo = InMemoryRepository([MonsterDefinition(id="goblin")])
    assert repo.get_by_id("goblin").id == "goblin"
    assert repo.get_by_id("Goblin") is None
    assert repo.get_by_id("") is None
    assert repo.get_by_id(None) is None


def test_require_raises_not_found():
    repo = InMemoryRepository()
    with pytest.raises(NotFound):
        repo.require("ghost")


def test_duplicates_replace_with_warning(caplog):
    repo = InMemoryRepository([LootTable(id="chest")])
    replacement = LootTable(id="chest", pick_mode="without_replacement")
    with caplog.at_level(logging.WARNING):
        repo.add(replacement)
    assert len(repo) == 1
    assert repo.require("chest") is replacement
    assert "duplicate" in caplog.text


def test_custom_key_and_iteration():
    repo = InMemoryRepository(["fire", "ice"], key=str.upper)
    assert "FIRE" in repo
    assert "fire" not in repo
    assert list(repo) == ["fire", "ice"]

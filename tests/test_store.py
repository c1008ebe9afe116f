"""
Tests for the durable recipe store.
"""

import asyncio
import json
import os

import pytest

from dinner_ideas.errors import DecodeError, WriteError
from dinner_ideas.profile import Profile
from dinner_ideas.recipes.records import FoodTag, Recipe, Step, sample_items
from dinner_ideas.recipes.store import RecipeStore, decode_collection, encode_collection


def run(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def _recipe(name="Shakshuka", **overrides):
    values = dict(
        name=name,
        description="Eggs poached in spiced tomato sauce.",
        prep_time=10,
        cook_time=20,
        steps=[Step(title="Simmer sauce", description="Cook tomatoes with cumin.")],
        tags=[FoodTag.VEGETARIAN],
        image="",
    )
    values.update(overrides)
    return Recipe(**values)


class TestLoad:
    """Tests for reading the collection file."""

    def test_fresh_install_loads_seed(self, store_path):
        store = RecipeStore(store_path)
        items = run(store.load())

        assert len(items) == 3
        assert items[0].name == "Spaghetti Bolognese"
        assert (items[0].prep_time, items[0].cook_time) == (15, 45)
        assert store.loaded
        assert not store_path.exists()

    def test_unreadable_path_loads_seed(self, tmp_path):
        # A directory where the file should be cannot be read as bytes
        path = tmp_path / "dinner-items.json"
        path.mkdir()
        items = run(RecipeStore(path).load())
        assert [item.name for item in items] == [item.name for item in sample_items()]

    def test_corrupt_file_raises_and_keeps_snapshot(self, store_path):
        store = RecipeStore(store_path)
        run(store.save([_recipe()]))
        run(store.load())

        store_path.write_text("{not json")
        with pytest.raises(DecodeError):
            run(store.load())

        assert [item.name for item in store.items] == ["Shakshuka"]
        assert isinstance(store.last_error, DecodeError)

    def test_schema_mismatch_is_decode_error(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps([{"name": "No times"}]))
        with pytest.raises(DecodeError):
            run(RecipeStore(store_path).load())

    def test_legacy_tag_spelling_loads(self, store_path):
        data = json.loads(encode_collection(sample_items()))
        data[2]["tags"] = ["Vegeterian", "Quick"]
        store_path.parent.mkdir(parents=True)
        store_path.write_text(json.dumps(data))

        items = run(RecipeStore(store_path).load())
        assert items[2].tags == [FoodTag.VEGETARIAN, FoodTag.QUICK]

    def test_duplicate_ids_are_decode_error(self):
        recipe = _recipe()
        data = encode_collection([recipe, recipe])
        with pytest.raises(DecodeError, match="duplicate"):
            decode_collection(data)

    def test_default_path_comes_from_profile(self, tmp_path):
        profile = Profile(name="test", data_root=tmp_path)
        store = RecipeStore(profile=profile)
        assert store.path == tmp_path / "documents" / "dinner-items.json"


class TestSave:
    """Tests for persisting the collection."""

    def test_round_trip_preserves_fields_and_order(self, store_path):
        items = sample_items() + [_recipe(version=3)]
        run(RecipeStore(store_path).save(items))

        loaded = run(RecipeStore(store_path).load())
        assert list(loaded) == items

    def test_saving_twice_is_idempotent(self, store_path):
        store = RecipeStore(store_path)
        run(store.save(sample_items()))
        first = store_path.read_bytes()
        run(store.save())
        assert store_path.read_bytes() == first

    def test_file_uses_persisted_field_names(self, store_path):
        run(RecipeStore(store_path).save(sample_items()))
        data = json.loads(store_path.read_text())

        first = data[0]
        assert first["prepTime"] == 15
        assert first["createdBy"] == 1
        assert first["tags"] == ["FamilyFriendly", "Cheap", "Vegan"]
        assert set(first["steps"][0]) == {"stepTitle", "stepDescription", "id"}

    def test_duplicate_ids_rejected_before_writing(self, store_path):
        recipe = _recipe()
        with pytest.raises(ValueError):
            run(RecipeStore(store_path).save([recipe, recipe]))
        assert not store_path.exists()

    def test_unwritable_location_raises_write_error(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        store = RecipeStore(blocker / "dinner-items.json")

        with pytest.raises(WriteError):
            run(store.save(sample_items()))
        assert isinstance(store.last_error, WriteError)

    def test_failed_replace_keeps_previous_file(self, store_path, monkeypatch):
        store = RecipeStore(store_path)
        run(store.save(sample_items()))
        before = store_path.read_bytes()

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(WriteError, match="disk full"):
            run(store.save([_recipe()]))

        assert store_path.read_bytes() == before
        assert [p.name for p in store_path.parent.iterdir()] == ["dinner-items.json"]

    def test_concurrent_saves_leave_a_complete_file(self, store_path):
        store = RecipeStore(store_path)

        async def save_many():
            await asyncio.gather(*(store.save([_recipe(f"Dish {i}")]) for i in range(5)))

        run(save_many())
        loaded = run(RecipeStore(store_path).load())
        assert len(loaded) == 1
        assert loaded[0].name.startswith("Dish ")


class TestMutations:
    """Tests for in-memory edits."""

    @pytest.fixture
    def store(self, store_path):
        store = RecipeStore(store_path)
        run(store.load())
        return store

    def test_commit_adds_and_persists(self, store, store_path):
        recipe = run(store.commit(_recipe()))
        assert store.get(recipe.id) == recipe

        loaded = run(RecipeStore(store_path).load())
        assert [item.name for item in loaded][-1] == "Shakshuka"

    def test_add_rejects_duplicate_id(self, store):
        existing = store.items[0]
        with pytest.raises(ValueError):
            store.add(existing)

    def test_update_touches_record(self, store):
        recipe = store.items[1].model_copy(update={"name": "Chicken Caesar"})
        updated = store.update(recipe, modifier_id=9)
        assert store.get(recipe.id).name == "Chicken Caesar"
        assert updated.last_modified_by == 9
        assert len(store) == 3

    def test_update_unknown_recipe_raises(self, store):
        with pytest.raises(KeyError):
            store.update(_recipe())

    def test_delete(self, store):
        target = store.items[0]
        removed = store.delete(str(target.id))
        assert removed.id == target.id
        assert store.get(target.id) is None
        assert len(store) == 2

    def test_find_by_name_and_id_prefix(self, store):
        target = store.items[2]
        assert store.find("vegetable stir fry") == target
        assert store.find(str(target.id)[:8]) == target
        assert store.find("nothing like this") is None
        assert store.find("") is None

    def test_search(self, store):
        assert [r.name for r in store.search("quick")] == ["Grilled Chicken Salad", "Vegetable Stir Fry"]

    def test_items_is_a_snapshot(self, store):
        snapshot = store.items
        store.add(_recipe())
        assert len(snapshot) == 3
        assert len(store.items) == 4

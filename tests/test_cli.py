"""
Tests for the typer CLI.
"""

import json

import pytest
from rich.console import Console
from typer.testing import CliRunner

from dinner_ideas import cli
from dinner_ideas.recipes.generator import RecipeGenerator

runner = CliRunner()


def invoke(*args):
    return runner.invoke(cli.app, list(args))


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep table rows on one line regardless of the terminal."""
    monkeypatch.setattr(cli, "console", Console(width=200))


@pytest.fixture
def store_file(home):
    path = home / "documents" / "dinner-items.json"
    path.parent.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def fake_model(monkeypatch, function_model):
    """Route `generate` through a streaming FunctionModel."""

    def make(error=None):
        model = function_model(error=error)
        monkeypatch.setattr(cli, "RecipeGenerator", lambda model_spec=None: RecipeGenerator(model))

    return make


class TestBrowse:
    """Tests for list, show and search."""

    def test_list_shows_seed(self, home):
        result = invoke("list")
        assert result.exit_code == 0
        assert "Spaghetti Bolognese" in result.output
        assert "1 hour" in result.output

    def test_show(self, home):
        result = invoke("show", "spaghetti bolognese")
        assert result.exit_code == 0
        assert "Boil pasta" in result.output
        assert "Family Friendly" in result.output

    def test_show_unknown(self, home):
        result = invoke("show", "Beef Wellington")
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_search(self, home):
        result = invoke("search", "stir")
        assert result.exit_code == 0
        assert "Vegetable Stir Fry" in result.output
        assert "Bolognese" not in result.output

    def test_corrupt_store_exits_with_error(self, store_file):
        store_file.write_text("[{]")
        result = invoke("list")
        assert result.exit_code == 1
        assert "Error" in result.output


class TestEdit:
    """Tests for add and delete."""

    def test_add(self, store_file):
        result = invoke(
            "add",
            "--name", "Miso Soup",
            "--description", "Warm and savory.",
            "--prep", "5",
            "--cook", "10",
            "--step", "Heat dashi: Bring dashi to a simmer.",
            "--step", "Add miso",
            "--tag", "Quick",
            "--tag", "vegan",
        )
        assert result.exit_code == 0, result.output

        saved = json.loads(store_file.read_text())
        assert len(saved) == 4
        miso = saved[-1]
        assert miso["name"] == "Miso Soup"
        assert miso["steps"][0]["stepTitle"] == "Heat dashi"
        assert miso["steps"][0]["stepDescription"] == "Bring dashi to a simmer."
        assert miso["steps"][1]["stepDescription"] == ""
        assert miso["tags"] == ["Quick", "Vegan"]

    def test_add_rejects_unknown_tag(self, store_file):
        result = invoke("add", "--name", "Soup", "--tag", "Spicy")
        assert result.exit_code != 0
        assert not store_file.exists()

    def test_delete(self, store_file):
        result = invoke("delete", "Grilled Chicken Salad")
        assert result.exit_code == 0

        names = [item["name"] for item in json.loads(store_file.read_text())]
        assert names == ["Spaghetti Bolognese", "Vegetable Stir Fry"]

    def test_delete_unknown(self, store_file):
        result = invoke("delete", "Nope")
        assert result.exit_code == 1
        assert not store_file.exists()


class TestGenerate:
    """Tests for the generate command."""

    def test_generate_and_save(self, store_file, fake_model):
        fake_model()
        result = invoke("generate", "--name", "Tacos")
        assert result.exit_code == 0, result.output
        assert "Added recipe: Crispy Fish Tacos" in result.output

        names = [item["name"] for item in json.loads(store_file.read_text())]
        assert names[-1] == "Crispy Fish Tacos"

    def test_generate_without_saving(self, store_file, fake_model):
        fake_model()
        result = invoke("generate", "--no-save")
        assert result.exit_code == 0, result.output
        assert not store_file.exists()

    def test_generation_failure(self, store_file, fake_model):
        fake_model(error=RuntimeError("quota exceeded"))
        result = invoke("generate")
        assert result.exit_code == 1
        assert "quota exceeded" in result.output
        assert not store_file.exists()


class TestPlan:
    """Tests for meal planning."""

    def test_plan(self, home):
        result = invoke("plan", "--count", "2")
        assert result.exit_code == 0
        assert "Meal plan" in result.output
        assert "1." in result.output and "2." in result.output
        assert "3." not in result.output

    def test_plan_rejects_zero(self, home):
        result = invoke("plan", "--count", "0")
        assert result.exit_code != 0

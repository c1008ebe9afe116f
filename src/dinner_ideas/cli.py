"""CLI for the recipe collection and recipe generation using typer."""

import asyncio
from typing import Annotated, List, Optional

import typer
from rich.console import Console
from rich.live import Live
from rich.markdown import Markdown
from rich.table import Table

from .errors import StoreError
from .logger import get_logger
from .recipes import (
    FoodTag,
    GenerationReconciler,
    GenerationState,
    Recipe,
    RecipeDraft,
    RecipeGenerator,
    RecipeStore,
    Step,
    format_duration,
    plan_meals,
)

logger = get_logger("cli")

app = typer.Typer(
    help="Dinner Ideas - keep a recipe collection and generate new recipes",
    context_settings={"help_option_names": ["-h", "--help"]},
    no_args_is_help=True,
)
console = Console()


def _run(coro):
    """Run a command coroutine, turning store failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except StoreError as e:
        logger.error(f"Command failed: {e}")
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


async def _open_store() -> RecipeStore:
    store = RecipeStore()
    await store.load()
    return store


def _tag_labels(tags: List[FoodTag]) -> str:
    return ", ".join(f"[{tag.color}]{tag.label}[/{tag.color}]" for tag in tags)


def _recipe_markdown(recipe: Recipe) -> str:
    content = f"# {recipe.name}\n\n"
    if recipe.description:
        content += f"{recipe.description}\n\n"
    content += (
        f"**Prep:** {format_duration(recipe.prep_time)} | "
        f"**Cook:** {format_duration(recipe.cook_time)} | "
        f"**Total:** {format_duration(recipe.total_time)}\n\n"
    )
    if recipe.tags:
        content += f"**Tags:** {', '.join(tag.label for tag in recipe.tags)}\n\n"

    if recipe.steps:
        content += "## Steps\n\n"
        for number, step in enumerate(recipe.steps, 1):
            content += f"{number}. **{step.title}** {step.description}\n"
    return content


def _draft_markdown(draft: Optional[RecipeDraft]) -> Markdown:
    if draft is None:
        return Markdown("*Thinking about dinner...*")

    content = f"# {draft.name or '...'}\n\n"
    if draft.description:
        content += f"{draft.description}\n\n"
    if draft.prep_time is not None:
        content += f"**Prep:** {format_duration(draft.prep_time)}  \n"
    if draft.cook_time is not None:
        content += f"**Cook:** {format_duration(draft.cook_time)}\n\n"
    if draft.steps:
        content += "## Steps\n\n"
        for number, step in enumerate(draft.steps, 1):
            content += f"{number}. **{step.title or '...'}** {step.description or ''}\n"
        content += "\n"
    if draft.tags:
        content += f"**Tags:** {', '.join(tag.label for tag in draft.tags)}\n"
    return Markdown(content)


def _print_recipes(recipes: List[Recipe], title: str) -> None:
    table = Table(title=title)
    table.add_column("Name", style="bold")
    table.add_column("Total time")
    table.add_column("Tags")
    table.add_column("Id", style="dim")
    for recipe in recipes:
        table.add_row(
            recipe.name,
            format_duration(recipe.total_time),
            _tag_labels(recipe.tags),
            str(recipe.id)[:8],
        )
    console.print(table)


def _parse_step(text: str) -> Step:
    title, _, details = text.partition(":")
    return Step(title=title.strip(), description=details.strip())


def _parse_tag(value: str) -> FoodTag:
    try:
        return FoodTag(value)
    except ValueError:
        choices = ", ".join(tag.value for tag in FoodTag)
        raise typer.BadParameter(f"Unknown tag '{value}'. Choose from: {choices}")


@app.command("list")
def list_recipes():
    """List all recipes."""
    store = _run(_open_store())

    if not store.items:
        console.print("[yellow]No recipes found.[/yellow]")
        return

    _print_recipes(list(store.items), "Recipes")


@app.command()
def show(ref: Annotated[str, typer.Argument(help="Recipe name or id")]):
    """Show a recipe."""
    store = _run(_open_store())
    recipe = store.find(ref)

    if not recipe:
        console.print(f"[red]Recipe '{ref}' not found.[/red]")
        raise typer.Exit(1)

    console.print(Markdown(_recipe_markdown(recipe)))


@app.command()
def search(text: Annotated[str, typer.Argument(help="Text to look for in names, descriptions and tags")]):
    """Search recipes by name, description or tag."""
    store = _run(_open_store())
    matches = store.search(text)

    if not matches:
        console.print(f"[yellow]No recipes found matching '{text}'[/yellow]")
        return

    _print_recipes(matches, f"Recipes matching '{text}'")


@app.command()
def add(
    name: Annotated[str, typer.Option("--name", help="Recipe name")],
    description: Annotated[str, typer.Option("--description", help="Short description")] = "",
    prep: Annotated[int, typer.Option("--prep", min=0, help="Prep time in minutes")] = 0,
    cook: Annotated[int, typer.Option("--cook", min=0, help="Cook time in minutes")] = 0,
    steps: Annotated[Optional[List[str]], typer.Option("--step", help="Step as 'Title: details'")] = None,
    tags: Annotated[Optional[List[str]], typer.Option("--tag", help="Food tag, e.g. Quick or 'Gluten Free'")] = None,
):
    """Add a recipe by hand."""
    recipe = Recipe.empty()
    recipe.name = name.strip()
    recipe.description = description
    recipe.prep_time = prep
    recipe.cook_time = cook
    recipe.steps = [_parse_step(step) for step in steps or []]
    recipe.tags = list(dict.fromkeys(_parse_tag(tag) for tag in tags or []))

    if not recipe.name:
        console.print("[red]Error: Recipe name cannot be empty[/red]")
        raise typer.Exit(1)

    async def _add() -> None:
        store = await _open_store()
        await store.commit(recipe)

    _run(_add())
    console.print(f"[green]✓[/green] Added recipe: {recipe.name}")


@app.command()
def delete(ref: Annotated[str, typer.Argument(help="Recipe name or id to delete")]):
    """Delete a recipe."""

    async def _delete() -> Optional[Recipe]:
        store = await _open_store()
        recipe = store.find(ref)
        if recipe is None:
            return None
        store.delete(recipe.id)
        await store.save()
        return recipe

    removed = _run(_delete())
    if removed is None:
        console.print(f"[red]Recipe '{ref}' not found.[/red]")
        raise typer.Exit(1)

    console.print(f"[green]✓[/green] Deleted recipe: {removed.name}")


@app.command()
def generate(
    name: Annotated[Optional[str], typer.Option("--name", help="Dish to generate, e.g. 'Tacos'")] = None,
    model: Annotated[Optional[str], typer.Option("--model", help="Model tier or 'provider:model'")] = None,
    save: Annotated[bool, typer.Option("--save/--no-save", help="Add the result to the collection")] = True,
):
    """Generate a new recipe, showing it as it streams in."""
    generator = RecipeGenerator(model)
    generator.prewarm()
    reconciler = GenerationReconciler(generator)

    async def _generate() -> Optional[Recipe]:
        with Live(_draft_markdown(None), console=console, refresh_per_second=8) as live:
            reconciler.subscribe(lambda draft: live.update(_draft_markdown(draft)))
            await reconciler.run(name)

        if reconciler.state is not GenerationState.COMPLETED:
            return None

        recipe = reconciler.finalize()
        if recipe is not None and save:
            store = await _open_store()
            await store.commit(recipe)
        return recipe

    recipe = _run(_generate())

    if reconciler.state is GenerationState.FAILED:
        console.print(f"[red]Error: {reconciler.error}[/red]")
        raise typer.Exit(1)
    if recipe is None:
        missing = ", ".join(reconciler.generated_draft.missing_fields()) if reconciler.generated_draft else "everything"
        console.print(f"[red]Generated recipe is incomplete (missing: {missing}).[/red]")
        raise typer.Exit(1)

    if save:
        console.print(f"[green]✓[/green] Added recipe: {recipe.name}")
    else:
        console.print(f"[yellow]Not saved:[/yellow] {recipe.name}")


@app.command()
def plan(
    count: Annotated[int, typer.Option("--count", "-n", min=1, help="Number of meals, at most 7")] = 3,
):
    """Pick a random meal plan from the collection."""
    store = _run(_open_store())
    meal_plan, recipes = plan_meals(store.items, count)

    if not recipes:
        console.print("[yellow]No recipes to plan with.[/yellow]")
        return

    logger.info(f"Planned {len(meal_plan.item_ids)} meals ({meal_plan.id})")
    console.print("[bold]Meal plan:[/bold]")
    for number, recipe in enumerate(recipes, 1):
        console.print(f"  {number}. {recipe.name} [dim]({format_duration(recipe.total_time)})[/dim]")


if __name__ == "__main__":
    app()

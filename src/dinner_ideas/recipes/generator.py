"""Pydantic-AI session that streams recipe drafts."""

import random
import threading
from typing import AsyncIterator, Optional

from pydantic_ai import Agent

from ..logger import get_logger
from ..models import ModelSpec, create_agent, default_model_spec
from .drafts import RecipeDraft

logger = get_logger("generator")


# Concepts picked from when the caller gives no name, for variety
RECIPE_TYPES: list[str] = [
    # Italian
    "Spaghetti Carbonara", "Margherita Pizza", "Lasagna Bolognese", "Chicken Parmigiana", "Fettuccine Alfredo",
    "Risotto Milanese", "Osso Buco", "Tiramisu", "Bruschetta", "Caprese Salad", "Minestrone Soup", "Gnocchi Pomodoro",

    # Asian
    "Pad Thai", "Chicken Teriyaki", "Beef and Broccoli", "Fried Rice", "Ramen Noodles", "Sushi Rolls",
    "General Tso's Chicken", "Sweet and Sour Pork", "Kung Pao Chicken", "Ma Po Tofu", "Korean BBQ",
    "Bibimbap", "Pho Bo", "Thai Green Curry", "Yakitori", "Tempura Vegetables", "Miso Soup", "Dumplings",

    # Mexican
    "Chicken Tacos", "Beef Enchiladas", "Guacamole", "Quesadillas", "Burrito Bowl", "Chiles Rellenos",
    "Tamales", "Fajitas", "Carnitas", "Pozole", "Elote", "Churros", "Tres Leches Cake",

    # American
    "Hamburger", "BBQ Ribs", "Mac and Cheese", "Fried Chicken", "Clam Chowder", "Buffalo Wings",
    "Meatloaf", "Apple Pie", "Pancakes", "Cornbread", "Pulled Pork", "Coleslaw", "Banana Bread",

    # French
    "Coq au Vin", "Beef Bourguignon", "Ratatouille", "French Onion Soup", "Bouillabaisse", "Quiche Lorraine",
    "Croque Monsieur", "Escargot", "Duck Confit", "Crème Brûlée", "Soufflé", "Cassoulet",

    # Indian
    "Butter Chicken", "Chicken Tikka Masala", "Biryani", "Samosas", "Naan Bread", "Dal Curry",
    "Tandoori Chicken", "Palak Paneer", "Vindaloo", "Chana Masala", "Korma", "Raita",

    # Mediterranean
    "Greek Salad", "Moussaka", "Hummus", "Falafel", "Shawarma", "Tabbouleh", "Dolmades",
    "Baklava", "Spanakopita", "Tzatziki", "Kebabs", "Paella",

    # British
    "Fish and Chips", "Shepherd's Pie", "Bangers and Mash", "Beef Wellington", "Chicken Tikka",
    "Full English Breakfast", "Yorkshire Pudding", "Spotted Dick", "Toad in the Hole",

    # German
    "Schnitzel", "Sauerbraten", "Bratwurst", "Sauerkraut", "Pretzels", "Black Forest Cake",
    "Spätzle", "Currywurst", "Strudel",

    # Comfort Foods
    "Chicken Soup", "Grilled Cheese Sandwich", "Tomato Soup", "Mashed Potatoes", "Pot Roast",
    "Chili Con Carne", "Beef Stew", "Chicken and Dumplings", "Tuna Casserole", "Meatballs",

    # Healthy Options
    "Quinoa Salad", "Avocado Toast", "Smoothie Bowl", "Kale Caesar Salad", "Grilled Salmon",
    "Vegetable Stir Fry", "Buddha Bowl", "Lentil Soup", "Chickpea Curry", "Zucchini Noodles",

    # Breakfast/Brunch
    "French Toast", "Eggs Benedict", "Breakfast Burrito", "Waffles", "Omelette", "Breakfast Hash",
    "Granola Parfait", "Breakfast Sandwich", "Breakfast Pizza", "Shakshuka",

    # Desserts
    "Chocolate Chip Cookies", "Brownies", "Cheesecake", "Ice Cream", "Fruit Tart", "Lemon Bars",
    "Carrot Cake", "Red Velvet Cake", "Panna Cotta", "Mousse", "Macarons", "Donuts",
]

FALLBACK_RECIPE_TYPE = "Classic Home-Cooked Meal"

RECIPE_INSTRUCTIONS = """Your job is to create a recipe item for the user to cook.
Define each step in the preparing and cooking process.

You can choose from a wide variety of recipe types including Italian, Asian, Mexican,
American, French, Indian, Mediterranean, British, German, comfort foods, healthy options,
breakfast/brunch items, and desserts. Create recipes that are inspired by these cuisines
but with your own creative variations.

Make sure to:
- Create a descriptive and appetizing recipe name
- Provide a clear description of the dish, its flavors, and what makes it special
- Include realistic preparation and cooking times (prep: 5-60 minutes, cook: 10-180 minutes)
- Break down the cooking process into clear, detailed steps (3-8 steps typically)
- Assign appropriate food tags that describe the dish characteristics
- Each step should have a clear title and detailed instructions
- Consider dietary restrictions and cooking skill levels
- Make the recipe practical for home cooking

Fill in the fields in this order: name, description, prep_time, cook_time, steps, tags."""


class RecipeGenerator:
    """Streams progressively more complete recipe drafts from a model.

    The agent, and with it the instructions, is created once per generator.
    Every yielded draft keeps whatever earlier drafts had.
    """

    def __init__(
        self,
        model: Optional[ModelSpec] = None,
        *,
        agent: Optional[Agent] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the generator.

        Args:
            model: Tier, "provider:model" string or Model instance. Defaults to
                DINNER_IDEAS_MODEL, then the medium tier.
            agent: Prebuilt agent, mainly for tests.
            rng: Random source used to pick a concept when no name is given.
        """
        self.model = default_model_spec() if model is None else model
        self._agent = agent
        self._rng = rng or random.Random()
        self._lock = threading.Lock()
        self._prewarm_started = False

    def _get_agent(self) -> Agent:
        with self._lock:
            if self._agent is None:
                self._agent = create_agent(
                    self.model,
                    output_type=RecipeDraft,
                    system_prompt=RECIPE_INSTRUCTIONS,
                )
                logger.debug(f"Created recipe agent for {self.model!r}")
            return self._agent

    def pick_recipe_type(self) -> str:
        if not RECIPE_TYPES:
            return FALLBACK_RECIPE_TYPE
        return self._rng.choice(RECIPE_TYPES)

    def build_prompt(self, name_hint: Optional[str] = None) -> str:
        """Prompt for one generation attempt, with the example shape appended."""
        if name_hint:
            request = f"Generate a recipe for: {name_hint}"
        else:
            recipe_type = self.pick_recipe_type()
            request = (
                f'Generate a recipe inspired by or variations of "{recipe_type}". '
                "You can create your own unique version, fusion style, "
                "or creative interpretation of this dish type."
            )

        example = RecipeDraft.sample().model_dump_json()
        return (
            f"{request}\n"
            "Here is an example of the desired format, but don't copy its content:\n"
            f"{example}"
        )

    async def stream_generate(self, name_hint: Optional[str] = None) -> AsyncIterator[RecipeDraft]:
        """Yield drafts until the model finishes.

        Errors from the model propagate to the consumer; drafts already
        yielded stay valid.
        """
        agent = self._get_agent()
        prompt = self.build_prompt(name_hint)
        logger.info(f"Streaming recipe draft (hint: {name_hint!r})")

        previous: Optional[RecipeDraft] = None
        count = 0
        async with agent.run_stream(prompt) as result:
            async for output in result.stream_output(debounce_by=None):
                draft = output.carry_forward(previous)
                if draft == previous:
                    continue
                previous = draft
                count += 1
                yield draft

        logger.info(f"Recipe draft stream finished after {count} updates")

    def prewarm(self) -> None:
        """Build the model client in the background, once. Never blocks or raises."""
        with self._lock:
            if self._prewarm_started:
                return
            self._prewarm_started = True

        threading.Thread(target=self._warm, name="dinner-ideas-prewarm", daemon=True).start()

    def _warm(self) -> None:
        try:
            self._get_agent()
        except Exception as e:
            logger.debug(f"Prewarm skipped: {e}")


__all__ = ["RECIPE_TYPES", "RECIPE_INSTRUCTIONS", "RecipeGenerator"]

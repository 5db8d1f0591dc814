#!/usr/bin/env python3
"""Ad hoc terminal runner for the EatMate client core.

Drives the same controllers the screens use and renders their states.

Usage:
    python query.py ingredients chicken rice garlic
    python query.py nutrients --max-calories 500 --min-protein 30
    python query.py search --query pasta --cuisine italian --diet vegetarian
    python query.py recipe 716429 --tab nutrition
    python query.py substitute butter
    python query.py chat "How do I boil an egg?"
    python query.py theme dark          # persist a mode
    python query.py theme               # show the active palette

Features:
- One controller per command, closed on exit
- Every render branch: results / no results / failed, per-tab "no data",
  substitutes / none found / error
- Theme mode persisted to THEME_STORE_PATH
"""

import argparse
import asyncio
import sys
from typing import Optional

from rich.console import Console
from rich.table import Table

from eatmate.api.completion import create_completion_client
from eatmate.api.spoonacular import SpoonacularClient
from eatmate.controllers.conversation import ConversationController
from eatmate.controllers.recipe_detail import RecipeDetailController, RecipeTab
from eatmate.controllers.search import (
    SearchSessionController,
    SearchState,
    create_ingredient_search,
    create_nutrient_search,
    create_parameter_search,
)
from eatmate.controllers.substitutes import SubstituteController, SubstituteView
from eatmate.controllers.theme import DeviceAppearance, ThemeManager
from eatmate.models.models import (
    ConversationMessage,
    Cuisine,
    Diet,
    IngredientCriteria,
    MessageRole,
    NutrientCriteria,
    ParameterCriteria,
    ThemeMode,
)
from eatmate.storage.store import JsonFileStore
from eatmate.utils.config import config
from eatmate.utils.logger import logger

console = Console()


# ============================================================================
# Rendering
# ============================================================================


def render_search(controller: SearchSessionController) -> None:
    if not controller.has_searched:
        return
    if controller.state is SearchState.FAILED:
        console.print(f"[red]✗ {controller.error_message}[/red]")
        return
    if controller.state is SearchState.NO_RESULTS:
        console.print(f"[yellow]{controller.empty_message}[/yellow]")
        return

    if controller.mode == "parameters" and controller.total_results > 0:
        console.print(f"[dim]Found {controller.total_results} recipes[/dim]")

    table = Table(title="Results")
    table.add_column("ID", style="cyan")
    table.add_column("Title")
    table.add_column("Info", style="dim")
    for recipe in controller.results:
        info = []
        if recipe.ready_in_minutes:
            info.append(f"{recipe.ready_in_minutes} mins")
        if recipe.servings:
            info.append(f"{recipe.servings} servings")
        if recipe.used_ingredient_count is not None:
            info.append(f"{recipe.used_ingredient_count} ingredients used")
        if recipe.missed_ingredient_count:
            info.append(f"{recipe.missed_ingredient_count} missing")
        if recipe.calories is not None:
            info.append(f"{recipe.calories} kcal")
        table.add_row(str(recipe.id), recipe.title, ", ".join(info))
    console.print(table)


def render_recipe(controller: RecipeDetailController) -> None:
    if controller.recipe is None:
        console.print(f"[red]✗ {controller.error_message or 'Recipe not found'}[/red]")
        return

    recipe = controller.recipe
    console.print(f"[bold]{recipe.title}[/bold]")
    if recipe.summary:
        console.print(f"[dim]{recipe.summary_text()}[/dim]")
    if recipe.ready_in_minutes:
        console.print(f"⏱  {recipe.ready_in_minutes} mins")
    if recipe.servings:
        console.print(f"👥 {recipe.servings} servings")
    console.print()

    tab = controller.active_tab
    console.print(f"[bold cyan]{tab.value.title()}[/bold cyan]")

    if tab is RecipeTab.INSTRUCTIONS:
        steps = controller.instructions_view()
        if not steps:
            console.print("[yellow]No instructions available for this recipe.[/yellow]")
        for step in steps:
            console.print(f"[green]{step.number}.[/green] {step.step}")

    elif tab is RecipeTab.INGREDIENTS:
        ingredients = controller.ingredients_view()
        if ingredients is None:
            console.print("[yellow]No ingredients information available.[/yellow]")
        else:
            for line in ingredients:
                console.print(f"• {line.amount:g} {line.unit} {line.name}")

    else:
        nutrition = controller.nutrition_view()
        if nutrition is None:
            console.print("[yellow]No nutrition information available.[/yellow]")
            return
        if nutrition.percent_protein is not None:
            console.print(
                f"Protein {nutrition.percent_protein}% | Fat {nutrition.percent_fat}% | "
                f"Carbs {nutrition.percent_carbs}%"
            )
        table = Table()
        table.add_column("Nutrient")
        table.add_column("Amount", justify="right")
        table.add_column("DV", justify="right", style="dim")
        for row in nutrition.nutrients:
            dv = f"{row.daily_value_percent}% DV" if row.daily_value_percent is not None else ""
            table.add_row(row.name, f"{row.amount:g} {row.unit}", dv)
        console.print(table)


def render_substitutes(controller: SubstituteController) -> None:
    view = controller.view
    if view is SubstituteView.ERROR:
        console.print(f"[red]✗ {controller.error_message}[/red]")
    elif view is SubstituteView.NO_SUBSTITUTES:
        console.print(f"[bold]Substitutes for {controller.result.ingredient}[/bold]")
        console.print("[yellow]No substitutes found for this ingredient.[/yellow]")
    elif view is SubstituteView.SUBSTITUTES:
        console.print(f"[bold]Substitutes for {controller.result.ingredient}[/bold]")
        for substitute in controller.result.substitutes:
            console.print(f"[green]•[/green] {substitute}")
    else:
        console.print(f"[dim]Try these examples: {', '.join(controller.examples)}[/dim]")


def render_message(message: ConversationMessage) -> None:
    if message.role is MessageRole.USER:
        console.print(f"[bold green]You:[/bold green] {message.content}")
    else:
        console.print(f"[bold cyan]EatMate:[/bold cyan] {message.content}")


# ============================================================================
# Commands
# ============================================================================


async def run_search(args: argparse.Namespace) -> None:
    async with SpoonacularClient() as client:
        if args.command == "ingredients":
            controller = create_ingredient_search(client)
            criteria = IngredientCriteria(number=args.number)
            for name in args.names:
                criteria.add(name)
        elif args.command == "nutrients":
            controller = create_nutrient_search(client)
            criteria = NutrientCriteria(
                min_calories=args.min_calories,
                max_calories=args.max_calories,
                min_protein=args.min_protein,
                max_protein=args.max_protein,
                min_carbs=args.min_carbs,
                max_carbs=args.max_carbs,
                min_fat=args.min_fat,
                max_fat=args.max_fat,
                number=args.number,
            )
        else:
            controller = create_parameter_search(client)
            criteria = ParameterCriteria(
                query=args.query, cuisine=args.cuisine, diet=args.diet, number=args.number
            )

        if not await controller.submit(criteria):
            console.print("[yellow]Nothing to search for - add an ingredient, query or filter.[/yellow]")
        render_search(controller)
        controller.close()


async def run_recipe(args: argparse.Namespace) -> None:
    async with SpoonacularClient() as client:
        controller = RecipeDetailController(client)
        await controller.load(args.recipe_id)
        controller.select_tab(args.tab)
        render_recipe(controller)
        controller.close()


async def run_substitute(args: argparse.Namespace) -> None:
    controller = SubstituteController(SpoonacularClient())
    if not await controller.lookup(args.ingredient):
        console.print("[yellow]Enter an ingredient.[/yellow]")
    render_substitutes(controller)
    controller.close()


async def run_chat(args: argparse.Namespace) -> None:
    controller = ConversationController(create_completion_client())
    render_message(controller.messages[0])
    controller.subscribe(render_message)

    pending: Optional[str] = " ".join(args.message) if args.message else None
    while True:
        if pending is None:
            if args.message:
                break
            pending = await asyncio.to_thread(console.input, "[bold green]>[/bold green] ")
        if pending.strip().lower() in ("exit", "quit"):
            break
        await controller.send(pending)
        pending = None
    controller.close()


async def run_theme(args: argparse.Namespace) -> None:
    manager = ThemeManager(JsonFileStore(config.THEME_STORE_PATH), DeviceAppearance(args.device))
    await manager.load()
    if args.mode:
        await manager.set_mode(args.mode)
    palette = manager.get_active_theme()
    console.print(f"Mode: [bold]{manager.mode.value}[/bold] -> palette [bold]{palette.name}[/bold]")
    console.print_json(data=palette.model_dump())
    manager.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="EatMate ad hoc runner")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ingredients", help="Search recipes by ingredients")
    p.add_argument("names", nargs="+")
    p.add_argument("--number", type=int, default=config.MAX_RECIPES)

    p = sub.add_parser("nutrients", help="Search recipes by nutrient ranges")
    defaults = NutrientCriteria()
    for field in NutrientCriteria.model_fields:
        if field == "number":
            continue
        p.add_argument(f"--{field.replace('_', '-')}", type=float, default=getattr(defaults, field))
    p.add_argument("--number", type=int, default=config.MAX_RECIPES)

    p = sub.add_parser("search", help="Search recipes by query, cuisine and diet")
    p.add_argument("--query", default="")
    p.add_argument("--cuisine", default=Cuisine.ANY.value, choices=[c.value for c in Cuisine])
    p.add_argument("--diet", default=Diet.ANY.value, choices=[d.value for d in Diet])
    p.add_argument("--number", type=int, default=config.MAX_RECIPES)

    p = sub.add_parser("recipe", help="Show one recipe tab")
    p.add_argument("recipe_id")
    p.add_argument("--tab", default=RecipeTab.INSTRUCTIONS.value, choices=[t.value for t in RecipeTab])

    p = sub.add_parser("substitute", help="Find substitutes for an ingredient")
    p.add_argument("ingredient")

    p = sub.add_parser("chat", help="Talk to the cooking assistant (interactive without a message)")
    p.add_argument("message", nargs="*")

    p = sub.add_parser("theme", help="Show or set the theme mode")
    p.add_argument("mode", nargs="?", choices=[m.value for m in ThemeMode])
    p.add_argument("--device", choices=["light", "dark"], default=None, help="Simulated device scheme")

    return parser


COMMANDS = {
    "ingredients": run_search,
    "nutrients": run_search,
    "search": run_search,
    "recipe": run_recipe,
    "substitute": run_substitute,
    "chat": run_chat,
    "theme": run_theme,
}


def main(argv: Optional[list[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        asyncio.run(COMMANDS[args.command](args))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except ValueError as e:
        # Missing API keys and invalid settings
        console.print(f"[red]✗ Error: {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()

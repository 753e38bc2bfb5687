"""Ingredient normalization and per-recipe match scoring."""

import re

from recipe_finder.exceptions import InputError
from recipe_finder.schemas.search import (
    IngredientRef,
    MatchMetrics,
    RecipeCandidate,
    ScoredIngredient,
    ScoredRecipe,
)

# Preparation-state words that say nothing about which ingredient it is
PREP_WORDS = (
    "fresh",
    "dried",
    "chopped",
    "sliced",
    "minced",
    "cubed",
    "grated",
    "ground",
)

MAX_DISPLAYED_MISSING = 3
EXACT_LENGTH_TOLERANCE = 2
MISSING_PENALTY = 5

_PARENTHETICAL_RE = re.compile(r"\s*\([^)]*\)")
_PREP_WORDS_RE = re.compile(r"\b(?:" + "|".join(PREP_WORDS) + r")\b")
_TRAILING_S_RE = re.compile(r"s$")
_WHITESPACE_RE = re.compile(r"\s+")


def _normalize_once(text: str) -> str:
    text = text.lower().strip()
    text = _PARENTHETICAL_RE.sub("", text)
    text = _PREP_WORDS_RE.sub(" ", text)
    # Naive depluralization: "tomatoes" -> "tomatoe", "molasses" -> "molasse"
    text = _TRAILING_S_RE.sub("", text)
    return _WHITESPACE_RE.sub(" ", text).strip()


def normalize_ingredient_name(name: str | None) -> str:
    """Canonicalize a free-text ingredient name for fuzzy comparison.

    Lowercases, drops parenthetical notes and preparation words, strips one
    trailing "s" and collapses whitespace. A single pass can leave text that a
    second pass would change further ("eggs fresh" -> "eggs" -> "egg"), so the
    pass is repeated until the text is stable.
    """
    if not name:
        return ""

    # Repeat until stable, which can go past a single pass: "tomatoes fresh"
    # is "tomatoes" after one pass and "tomatoe" here; "grass" ends as "gra".
    previous = None
    text = name
    while text != previous:
        previous = text
        text = _normalize_once(text)
    return text


def parse_ingredient_input(ingredients: list[str] | str | None) -> list[str]:
    """Clean the raw ingredient value of a search request.

    Accepts a list of names or one comma-separated string. Returns lowercase,
    trimmed, non-empty names in input order.

    Raises:
        InputError: if nothing was supplied or nothing usable remains
    """
    if not ingredients:
        raise InputError("Please provide at least one ingredient")

    if isinstance(ingredients, str):
        parts = ingredients.split(",")
    elif isinstance(ingredients, list):
        parts = [part for part in ingredients if isinstance(part, str)]
    else:
        raise InputError("No valid ingredients provided")

    cleaned = [part.lower().strip() for part in parts]
    cleaned = [part for part in cleaned if part]
    if not cleaned:
        raise InputError("No valid ingredients provided")
    return cleaned


def _overlaps(a: str, b: str) -> bool:
    """Bidirectional substring test ("chicken" vs "chicken breast")."""
    return a in b or b in a


def _is_exact(recipe_ingredient: str, user_ingredient: str) -> bool:
    if recipe_ingredient == user_ingredient:
        return True
    close_in_length = (
        abs(len(recipe_ingredient) - len(user_ingredient)) <= EXACT_LENGTH_TOLERANCE
    )
    return close_in_length and _overlaps(recipe_ingredient, user_ingredient)


def calculate_match_metrics(
    normalized_user_ingredients: list[str], recipe: RecipeCandidate
) -> MatchMetrics:
    """Compare one candidate recipe against the user's normalized ingredients.

    Args:
        normalized_user_ingredients: output of normalize_ingredient_name per item
        recipe: candidate with the provider's used/missed ingredient lists

    Returns:
        MatchMetrics with score = ratio * 100 - missing_count * 5
    """
    used = [normalize_ingredient_name(ing.name) for ing in recipe.used_ingredients]
    missed = [normalize_ingredient_name(ing.name) for ing in recipe.missed_ingredients]

    matched = [
        ing for ing in used if any(_overlaps(ing, user) for user in normalized_user_ingredients)
    ]
    exact = [
        ing for ing in used if any(_is_exact(ing, user) for user in normalized_user_ingredients)
    ]
    missing = [
        ing
        for ing in missed
        if not any(_overlaps(ing, user) for user in normalized_user_ingredients)
    ]

    total_used = len(used)
    match_ratio = len(matched) / total_used if total_used > 0 else 0.0

    return MatchMetrics(
        matched_ingredients=matched,
        exact_matches=exact,
        missing_ingredients=missing[:MAX_DISPLAYED_MISSING],
        missing_count=len(missing),
        match_ratio=match_ratio,
        total_used_ingredients=total_used,
        matched_count=len(matched),
        score=match_ratio * 100 - len(missing) * MISSING_PENALTY,
    )


def _scored_ingredient(ingredient: IngredientRef) -> ScoredIngredient:
    return ScoredIngredient(
        id=ingredient.id,
        name=ingredient.name,
        amount=ingredient.amount,
        unit=ingredient.unit,
        image=ingredient.image,
        normalized=normalize_ingredient_name(ingredient.name),
    )


def score_recipe(normalized_user_ingredients: list[str], recipe: RecipeCandidate) -> ScoredRecipe:
    """Annotate a candidate recipe with its match metrics."""
    return ScoredRecipe(
        id=recipe.id,
        title=recipe.title,
        image=recipe.image,
        likes=recipe.likes,
        used_ingredients=[_scored_ingredient(ing) for ing in recipe.used_ingredients],
        missed_ingredients=[_scored_ingredient(ing) for ing in recipe.missed_ingredients],
        unused_ingredients=recipe.unused_ingredients,
        match_metrics=calculate_match_metrics(normalized_user_ingredients, recipe),
    )

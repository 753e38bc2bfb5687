"""Tests for ingredient normalization, input parsing and match scoring."""

import pytest

from recipe_finder.exceptions import InputError
from recipe_finder.schemas.search import RecipeCandidate
from recipe_finder.services.ingredient_matching import (
    calculate_match_metrics,
    normalize_ingredient_name,
    parse_ingredient_input,
    score_recipe,
)


def make_recipe(used: list[str], missed: list[str] | None = None, **kwargs) -> RecipeCandidate:
    return RecipeCandidate.model_validate(
        {
            "id": kwargs.pop("id", 1),
            "title": kwargs.pop("title", "Test Recipe"),
            "usedIngredients": [{"name": name} for name in used],
            "missedIngredients": [{"name": name} for name in (missed or [])],
            **kwargs,
        }
    )


class TestNormalizeIngredientName:
    """Tests for normalize_ingredient_name."""

    def test_strips_prep_word_and_one_trailing_s(self):
        """'tomatoes' loses only its final s, so the result is 'tomatoe'."""
        assert normalize_ingredient_name("Fresh Tomatoes") == "tomatoe"

    def test_molasses_keeps_the_inner_s(self):
        assert normalize_ingredient_name("molasses") == "molasse"

    def test_removes_parenthetical_notes(self):
        assert normalize_ingredient_name("onion (diced)") == "onion"
        assert normalize_ingredient_name("Butter (unsalted, softened) stick") == "butter stick"

    def test_parenthetical_removal_joins_surrounding_text(self):
        assert normalize_ingredient_name("a(b)c") == "ac"
        assert normalize_ingredient_name("flour  (sifted)") == "flour"

    def test_removes_every_prep_word(self):
        assert normalize_ingredient_name("chopped fresh basil") == "basil"
        assert normalize_ingredient_name("dried sliced minced cubed grated garlic") == "garlic"
        assert normalize_ingredient_name("ground beef") == "beef"

    def test_prep_words_only_match_whole_words(self):
        """'groundnut' is an ingredient, not ground + nut."""
        assert normalize_ingredient_name("groundnut oil") == "groundnut oil"
        assert normalize_ingredient_name("refreshed greens") == "refreshed green"

    def test_collapses_whitespace(self):
        assert normalize_ingredient_name("  olive    oil \t") == "olive oil"

    def test_lowercases(self):
        assert normalize_ingredient_name("CHICKEN Breast") == "chicken breast"

    def test_empty_and_none(self):
        assert normalize_ingredient_name("") == ""
        assert normalize_ingredient_name(None) == ""
        assert normalize_ingredient_name("   ") == ""

    def test_prep_word_alone_normalizes_to_empty(self):
        assert normalize_ingredient_name("Fresh") == ""

    def test_trailing_s_exposed_by_removal_is_stripped(self):
        """A plural left at the end once prep words go still loses its s."""
        assert normalize_ingredient_name("tomatoes fresh") == "tomatoe"
        assert normalize_ingredient_name("grass") == "gra"

    @pytest.mark.parametrize(
        "raw",
        [
            "Fresh Tomatoes",
            "molasses",
            "grass",
            "eggs fresh",
            "grounds",
            "ss",
            "Chicken Breasts (boneless)",
            "  ((nested) parens)  ",
            "(unclosed paren",
            "cherry tomatoes s",
            "",
        ],
    )
    def test_idempotent(self, raw):
        once = normalize_ingredient_name(raw)
        assert normalize_ingredient_name(once) == once


class TestParseIngredientInput:
    """Tests for parse_ingredient_input."""

    def test_list_is_lowercased_and_trimmed(self):
        assert parse_ingredient_input(["  Chicken ", "RICE", ""]) == ["chicken", "rice"]

    def test_comma_separated_string(self):
        assert parse_ingredient_input("chicken, rice ,, Garlic") == ["chicken", "rice", "garlic"]

    @pytest.mark.parametrize("value", [None, [], ""])
    def test_missing_input_rejected(self, value):
        with pytest.raises(InputError, match="at least one ingredient"):
            parse_ingredient_input(value)

    @pytest.mark.parametrize("value", [[" ", ""], " , ,", 42])
    def test_nothing_usable_rejected(self, value):
        with pytest.raises(InputError, match="No valid ingredients"):
            parse_ingredient_input(value)


class TestCalculateMatchMetrics:
    """Tests for calculate_match_metrics."""

    def test_partial_name_counts_as_match(self):
        metrics = calculate_match_metrics(["chicken", "rice"], make_recipe(["chicken breast"]))

        assert metrics.matched_ingredients == ["chicken breast"]
        assert metrics.match_ratio == 1.0
        assert metrics.missing_count == 0
        assert metrics.score == 100.0

    def test_exact_requires_close_length(self):
        """'chicken breast' overlaps 'chicken' but differs by 7 characters."""
        metrics = calculate_match_metrics(
            ["chicken", "rice"], make_recipe(["chicken breast", "brown rice", "rice"])
        )

        assert metrics.matched_count == 3
        assert metrics.exact_matches == ["rice"]

    def test_exact_allows_two_character_difference(self):
        metrics = calculate_match_metrics(["pea"], make_recipe(["peas", "peach"]))

        # "peas" normalizes to "pea"; "peach" contains "pea" and is 2 longer
        assert metrics.exact_matches == ["pea", "peach"]

    def test_missing_ingredients_capped_at_three(self):
        recipe = make_recipe(["chicken"], ["garlic", "onion", "ginger", "lime", "cilantro"])
        metrics = calculate_match_metrics(["chicken"], recipe)

        assert metrics.missing_ingredients == ["garlic", "onion", "ginger"]
        assert metrics.missing_count == 5
        assert metrics.score == 100.0 - 5 * 5

    def test_missed_ingredient_the_user_has_is_not_missing(self):
        recipe = make_recipe(["chicken"], ["garlic cloves", "soy sauce"])
        metrics = calculate_match_metrics(["chicken", "garlic"], recipe)

        assert metrics.missing_ingredients == ["soy sauce"]
        assert metrics.missing_count == 1

    def test_no_used_ingredients_gives_zero_ratio(self):
        metrics = calculate_match_metrics(["chicken"], make_recipe([], ["garlic"]))

        assert metrics.match_ratio == 0.0
        assert metrics.total_used_ingredients == 0
        assert metrics.score == -5.0

    def test_ratio_stays_in_bounds(self):
        recipe = make_recipe(["chicken", "beef", "pork", "tofu"], ["salt"])
        metrics = calculate_match_metrics(["chicken", "tofu"], recipe)

        assert 0.0 <= metrics.match_ratio <= 1.0
        assert metrics.match_ratio == 0.5
        assert metrics.score == 50.0 - 5

    def test_score_can_go_negative(self):
        recipe = make_recipe(["beef"], [f"spice {n}" for n in range(30)])
        metrics = calculate_match_metrics(["chicken"], recipe)

        assert metrics.score == -150.0


def test_score_recipe_echoes_normalized_names():
    recipe = make_recipe(["Fresh Tomatoes"], ["Garlic (minced)"], likes=None)
    scored = score_recipe(["tomatoe"], recipe)

    assert scored.likes == 0
    assert scored.used_ingredients[0].name == "Fresh Tomatoes"
    assert scored.used_ingredients[0].normalized == "tomatoe"
    assert scored.missed_ingredients[0].normalized == "garlic"
    assert scored.match_metrics.match_ratio == 1.0

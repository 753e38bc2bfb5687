"""Spoonacular API client for ingredient search and recipe details."""

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from recipe_finder.config import get_settings
from recipe_finder.exceptions import QuotaExceededError, UpstreamAuthError, UpstreamError
from recipe_finder.schemas.search import RecipeCandidate

logger = logging.getLogger(__name__)


class SpoonacularClient:
    """Thin async wrapper around the two Spoonacular endpoints we use.

    Failures are translated into UpstreamError subclasses and never retried;
    the API is rate limited and a retry would only burn more quota.
    """

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.spoonacular_api_key
        self.base_url = (base_url or settings.spoonacular_base_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.spoonacular_timeout_seconds
        self.max_results = settings.search_max_results
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        """Check if an API key is available."""
        return bool(self.api_key)

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        if not self.is_configured:
            raise UpstreamAuthError("Spoonacular API key is not configured")

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url, timeout=self.timeout, transport=self._transport
            ) as client:
                response = await client.get(path, params={**params, "apiKey": self.api_key})
                response.raise_for_status()
                return response.json()
        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Spoonacular API error {status_code} for {path}: {e.response.text}")
            if status_code == 402:
                raise QuotaExceededError(
                    "API quota exceeded. Please try again later.", status_code
                ) from e
            if status_code == 401:
                raise UpstreamAuthError(
                    "Invalid API key. Please check your Spoonacular API configuration.",
                    status_code,
                ) from e
            raise UpstreamError("Error fetching data from Spoonacular API", status_code) from e
        except httpx.HTTPError as e:
            logger.error(f"Spoonacular request failed for {path}: {e}")
            raise UpstreamError("Error fetching data from Spoonacular API") from e
        except ValueError as e:
            logger.error(f"Spoonacular returned invalid JSON for {path}: {e}")
            raise UpstreamError("Invalid response from Spoonacular API") from e

    async def find_by_ingredients(
        self,
        ingredients: list[str],
        number: int = 15,
        ranking: int = 1,
        ignore_pantry: bool = True,
    ) -> list[RecipeCandidate]:
        """Find recipes that use the given ingredients.

        Args:
            ingredients: Cleaned ingredient names
            number: Requested result count (capped at search_max_results)
            ranking: 1 maximizes used ingredients, 2 minimizes missing ones
            ignore_pantry: Ignore staples like water, salt and flour

        Returns:
            Candidate recipes with used/missed ingredient lists
        """
        data = await self._get(
            "/recipes/findByIngredients",
            {
                "ingredients": ",".join(ingredients),
                "number": min(number, self.max_results),
                "ranking": ranking,
                "ignorePantry": str(ignore_pantry).lower(),
            },
        )
        if not isinstance(data, list):
            raise UpstreamError("Unexpected search response from Spoonacular API")
        try:
            return [RecipeCandidate.model_validate(item) for item in data]
        except ValidationError as e:
            logger.error(f"Unexpected recipe shape in search response: {e}")
            raise UpstreamError("Unexpected search response from Spoonacular API") from e

    async def get_recipe_information(
        self, recipe_id: int, include_nutrition: bool = False
    ) -> dict[str, Any]:
        """Fetch full details for one recipe."""
        data = await self._get(
            f"/recipes/{recipe_id}/information",
            {"includeNutrition": str(include_nutrition).lower()},
        )
        if not isinstance(data, dict):
            raise UpstreamError("Unexpected recipe response from Spoonacular API")
        return data

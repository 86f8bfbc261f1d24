"""
AI recipe generation for a single store product.

Sends one fixed prompt built from {product, dishType, dietary} to the LLM
provider and returns the model's text as-is. There is no retry and no
parsing of the answer.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from llm_provider import LLMProvider, MissingAPIKeyError, require_llm_provider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-3-5-haiku-latest"
DEFAULT_STORE_NAME = "Saratoga Olive Oil"


class GenerateRecipeRequest(BaseModel):
    """Body of POST /api/recipe."""
    model_config = ConfigDict(populate_by_name=True)

    product: str
    dish_type: str = Field(alias="dishType")
    dietary: str

    @field_validator("product", "dish_type", "dietary")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class GenerationError(Exception):
    """Generation failed; ``status`` is the HTTP status to report, ``code`` a short reason."""

    def __init__(self, message: str, status: int = 500, code: str = "internal_error"):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code


def build_prompt(request: GenerateRecipeRequest, store_name: str = DEFAULT_STORE_NAME) -> str:
    return (
        f"Create a gourmet recipe using {request.product}.\n"
        f"Dish type: {request.dish_type}.\n"
        f"Dietary preference: {request.dietary}.\n"
        "Return: a title, ingredients with quantities (US measurements), "
        "and step-by-step instructions.\n"
        f"Also suggest one pairing with another {store_name} product."
    )


class RecipeGenerator:
    """
    Wraps an LLMProvider with the recipe prompt and error shape.

    Without an explicit provider, one is resolved from the environment on
    every call; a missing API key fails that call with a 500.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        max_tokens: int = 800,
        store_name: str = DEFAULT_STORE_NAME,
    ):
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.store_name = store_name

    @classmethod
    def from_env(cls, provider: Optional[LLMProvider] = None) -> "RecipeGenerator":
        """
        Build a generator from environment variables.

        Environment Variables:
            RECIPE_MODEL: Model id
            RECIPE_TEMPERATURE: Sampling temperature
            RECIPE_MAX_TOKENS: Output token cap
            STORE_NAME: Store named in the pairing request
        """
        return cls(
            provider=provider,
            model=os.environ.get("RECIPE_MODEL", DEFAULT_MODEL),
            temperature=float(os.environ.get("RECIPE_TEMPERATURE", "0.7")),
            max_tokens=int(os.environ.get("RECIPE_MAX_TOKENS", "800")),
            store_name=os.environ.get("STORE_NAME", DEFAULT_STORE_NAME),
        )

    def _resolve_provider(self) -> LLMProvider:
        if self.provider is not None:
            return self.provider
        try:
            return require_llm_provider()
        except MissingAPIKeyError as e:
            logger.error(f"Recipe generation unavailable: {e}")
            raise GenerationError(str(e), status=500, code="missing_api_key") from e

    def generate(self, request: GenerateRecipeRequest) -> str:
        """
        Generate recipe text for one product.

        Raises:
            GenerationError: missing API key (500), provider failure (its
                status code when it has one, else 500) or empty output (502)
        """
        provider = self._resolve_provider()
        prompt = build_prompt(request, self.store_name)
        logger.info(
            f"Generating recipe: product={request.product!r}, "
            f"dish_type={request.dish_type!r}, dietary={request.dietary!r}, model={self.model}"
        )

        try:
            text = provider.complete(
                prompt,
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
            )
        except Exception as e:
            status = getattr(e, "status_code", None) or 500
            code = getattr(e, "code", None) or getattr(e, "type", None) or "internal_error"
            logger.error(f"Recipe generation failed ({status}, {code}): {e}", exc_info=True)
            raise GenerationError(
                f"Recipe generation failed: {e}", status=status, code=str(code)
            ) from e

        text = (text or "").strip()
        if not text:
            raise GenerationError(
                "The model returned no content. Try again or adjust the prompt.",
                status=502,
                code="empty_response",
            )
        return text

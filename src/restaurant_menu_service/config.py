"""Service configuration loaded from the environment.

The behavioral differences between deployments (activity filtering on the
menu tree, soft vs hard delete) are feature flags here rather than separate
server variants.
"""

import os

from pydantic import BaseModel, Field


def env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class ServiceConfig(BaseModel):
    """Runtime configuration for the menu service."""

    supabase_url: str = Field(..., description="Base URL of the Supabase project")
    supabase_key: str = Field(..., description="Supabase service or anon key")
    store_timeout_seconds: float = Field(
        default=10.0, description="Timeout for each store and external call", gt=0
    )
    filter_inactive_restaurants: bool = Field(
        default=True, description="Drop inactive restaurants from the menu tree"
    )
    filter_inactive_menus: bool = Field(
        default=False, description="Drop inactive menus from the menu tree"
    )
    soft_delete_items: bool = Field(
        default=True, description="Deleting a menu item flips is_active instead of removing the row"
    )
    protein_option_name: str = Field(
        default="protein", description="Name fragment identifying the protein custom option"
    )
    groq_api_key: str | None = Field(None, description="API key for the translation service")
    groq_model: str = Field(default="llama-3.1-8b-instant", description="Translation model")
    groq_base_url: str = Field(
        default="https://api.groq.com/openai/v1", description="Translation API base URL"
    )
    pollinations_api_key: str | None = Field(None, description="API key for image generation")
    pollinations_base_url: str = Field(
        default="https://image.pollinations.ai", description="Image generation base URL"
    )

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Build configuration from environment variables.

        Returns:
            ServiceConfig populated from the process environment

        Raises:
            ValueError: If SUPABASE_URL or SUPABASE_KEY is not set
        """
        supabase_url = os.getenv("SUPABASE_URL")
        supabase_key = os.getenv("SUPABASE_KEY")

        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY must be set in environment")

        return cls(
            supabase_url=supabase_url,
            supabase_key=supabase_key,
            store_timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "10")),
            filter_inactive_restaurants=env_flag("FILTER_INACTIVE_RESTAURANTS", True),
            filter_inactive_menus=env_flag("FILTER_INACTIVE_MENUS", False),
            soft_delete_items=env_flag("SOFT_DELETE_ITEMS", True),
            protein_option_name=os.getenv("PROTEIN_OPTION_NAME", "protein"),
            groq_api_key=os.getenv("GROQ_API_KEY") or None,
            groq_model=os.getenv("GROQ_MODEL", "llama-3.1-8b-instant"),
            groq_base_url=os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1"),
            pollinations_api_key=os.getenv("POLLINATIONS_API_KEY") or None,
            pollinations_base_url=os.getenv(
                "POLLINATIONS_BASE_URL", "https://image.pollinations.ai"
            ),
        )

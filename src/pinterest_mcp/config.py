from functools import lru_cache
from pydantic_settings import BaseSettings


# Defaults applied by the argument normalizer when a field cannot be recovered
DEFAULT_SEARCH_KEYWORD = "landscape"
DEFAULT_SEARCH_LIMIT = 10
DEFAULT_HEADLESS_MODE = True


class Settings(BaseSettings):
    """Environment-driven configuration for the MCP server."""

    # Server identity reported during MCP initialization
    MCP_SERVER_NAME: str = "pinterest-mcp-server"
    MCP_SERVER_VERSION: str = "1.0.0"

    # Content-fetching collaborator, as "module:attribute".
    # The attribute may be a class (instantiated without arguments) or a ready object.
    PINTEREST_SCRAPER: str = "pinterest_scraper:PinterestScraper"

    # When true, a failing or misbehaving scraper is reported as "0 images found".
    # Set to false to surface those failures as MCP internal errors instead.
    PINTEREST_SWALLOW_SEARCH_ERRORS: bool = True

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


# Convenience instance for modules that import `settings` directly.
settings: Settings = get_settings()

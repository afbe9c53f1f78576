from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "ProxyPrinter"
    debug: bool = False

    user_agent: str = "ProxyPrinter/1.0"
    request_timeout: float = 30.0

    # Retries on 5xx, 408, 429 and network errors; delay is base * 2**attempt
    max_retries: int = 3
    retry_base_delay: float = 2.0

    scryfall_api_url: str = "https://api.scryfall.com"
    archidekt_api_url: str = "https://archidekt.com/api"
    moxfield_api_url: str = "https://api2.moxfield.com/v3"
    edhrec_url: str = "https://edhrec.com"
    mtggoldfish_url: str = "https://www.mtggoldfish.com"

    # Key of Scryfall's image_uris object used for printing
    image_size: str = "large"

    max_concurrent_lookups: int = 4
    max_token_copies: int = 100


settings = Settings()


# =============================================================================
# CATALOG LANGUAGES
# =============================================================================

# Language codes accepted by Scryfall's `lang` field
SUPPORTED_LANGUAGES = frozenset(
    {
        "en",
        "es",
        "fr",
        "de",
        "it",
        "pt",
        "ja",
        "ko",
        "ru",
        "zhs",
        "zht",
        "he",
        "la",
        "grc",
        "ar",
        "sa",
        "ph",
    }
)

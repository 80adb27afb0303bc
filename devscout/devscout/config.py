import os
from pathlib import Path
from dotenv import load_dotenv
from pydantic import BaseModel

from .errors import ConfigError

# Load .env from devscout directory
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)


def require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ConfigError(f"Missing required environment variable: {name}")
    return value


def optional_env(name: str, default: str = "") -> str:
    return os.getenv(name, default)


class SupabaseConfig(BaseModel):
    url: str
    secret_key: str


class SerperConfig(BaseModel):
    api_key: str
    base_url: str = "https://google.serper.dev/search"
    results_per_query: int = 5


class GitHubConfig(BaseModel):
    token: str = ""
    api_url: str = "https://api.github.com"
    raw_url: str = "https://raw.githubusercontent.com"


class AnthropicConfig(BaseModel):
    api_key: str
    model: str = "claude-haiku-4-5-20251001"
    max_tokens: int = 1024


class BrowserbaseConfig(BaseModel):
    api_key: str = ""
    project_id: str = ""
    api_url: str = "https://api.browserbase.com/v1"
    proxy_country: str = "US"


class LinkedInConfig(BaseModel):
    session_cookie: str = ""
    scrape_delay_seconds: float = 8.0


class SixtyFourConfig(BaseModel):
    api_key: str = ""
    api_url: str = "https://api.sixtyfour.ai"


class FolkConfig(BaseModel):
    api_key: str = ""
    api_url: str = "https://api.folk.app/v1"


class DiscoveryConfig(BaseModel):
    max_batch_size: int = 10
    api_timeout_seconds: float = 30.0
    crawl_timeout_seconds: float = 60.0
    llm_timeout_seconds: float = 60.0
    scrape_timeout_seconds: float = 120.0


class Config(BaseModel):
    supabase: SupabaseConfig
    serper: SerperConfig
    github: GitHubConfig
    anthropic: AnthropicConfig
    browserbase: BrowserbaseConfig
    linkedin: LinkedInConfig
    sixtyfour: SixtyFourConfig
    folk: FolkConfig
    discovery: DiscoveryConfig
    log_level: str = "INFO"


def load_config() -> Config:
    return Config(
        supabase=SupabaseConfig(
            url=require_env("SUPABASE_URL"),
            secret_key=require_env("SUPABASE_SECRET_KEY"),
        ),
        serper=SerperConfig(
            api_key=require_env("SERPER_API_KEY"),
        ),
        github=GitHubConfig(
            token=optional_env("GITHUB_TOKEN"),
        ),
        anthropic=AnthropicConfig(
            api_key=require_env("ANTHROPIC_API_KEY"),
            model=optional_env("ANTHROPIC_MODEL", "claude-haiku-4-5-20251001"),
        ),
        browserbase=BrowserbaseConfig(
            api_key=optional_env("BROWSERBASE_API_KEY"),
            project_id=optional_env("BROWSERBASE_PROJECT_ID"),
            proxy_country=optional_env("BROWSERBASE_PROXY_COUNTRY", "US"),
        ),
        linkedin=LinkedInConfig(
            session_cookie=optional_env("LINKEDIN_SESSION_COOKIE"),
            scrape_delay_seconds=float(optional_env("LINKEDIN_SCRAPE_DELAY", "8")),
        ),
        sixtyfour=SixtyFourConfig(
            api_key=optional_env("SIXTYFOUR_API_KEY"),
        ),
        folk=FolkConfig(
            api_key=optional_env("FOLK_API_KEY"),
        ),
        discovery=DiscoveryConfig(),
        log_level=optional_env("LOG_LEVEL", "INFO"),
    )

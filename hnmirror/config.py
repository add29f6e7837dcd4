"""
Runtime settings for the mirror, read from the environment and `.env`.

Nested sections map to `SECTION__FIELD` variables, e.g. `REDDIT__SUBREDDIT`
or `MIRROR__MAX_ERRORS`.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, PositiveFloat, PositiveInt, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Supported runtime environments."""

    LOCAL = "local"
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class ListingView(str, Enum):
    """Listing views used to build the existing-post index."""

    NEW = "new"
    HOT = "hot"
    TOP = "top"


class AppSettings(BaseModel):
    """Identity of the running service as reported in logs."""

    name: str = Field(default="hn-mirror", description="Human-readable service name.")
    version: str = Field(default="0.1.0", description="Deployed application version.")
    environment: Environment = Field(
        default=Environment.LOCAL, description="Deployment environment identifier."
    )
    debug: bool = Field(default=False, description="Enable debug features and verbose logs.")


class LoggingSettings(BaseModel):
    """Console and rotating-file logging."""

    level: str = Field(default="INFO", description="Root logging level.")
    format: str = Field(
        default="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        description="Standard logging format string.",
    )
    directory: Path = Field(default=Path("logs"), description="Directory for log files.")
    file_enabled: bool = Field(default=True, description="Also write to a rotating log file.")
    file_name: str = Field(default="hn-mirror.log", description="Primary log file name.")
    max_bytes: PositiveInt = Field(
        default=5 * 1024 * 1024, description="Maximum file size before rotating."
    )
    backup_count: PositiveInt = Field(default=5, description="Number of rotated log files to keep.")


class RedditSettings(BaseModel):
    """Credentials and behavior of the subreddit the feed is mirrored into."""

    client_id: str = Field(default="", description="Reddit app client id.")
    client_secret: str = Field(default="", description="Reddit app client secret.")
    username: str = Field(default="hnmod", description="Account that submits the posts.")
    password: str = Field(default="", description="Password of the posting account.")
    user_agent: str = Field(
        default="hackernews:hnmod:0.1.0", description="User agent for the Reddit API."
    )
    subreddit: str = Field(default="hackernews", description="Target subreddit.")
    timeout_seconds: PositiveFloat = Field(
        default=30.0, description="Timeout applied to every Reddit API request."
    )
    write_interval_seconds: float = Field(
        default=1.0, ge=0.0, description="Minimum spacing between submit/reply calls."
    )

    @field_validator("subreddit")
    @classmethod
    def strip_prefix(cls, value: str) -> str:
        """Accept both 'hackernews' and 'r/hackernews'."""
        value = value.strip()
        if value.startswith("r/"):
            value = value[2:]
        if not value:
            raise ValueError("subreddit must be a non-empty string.")
        return value


class FeedSettings(BaseModel):
    """Upstream RSS feed location and the thresholds it applies."""

    base_url: str = Field(default="https://hnrss.org", description="Feed service base URL.")
    feed: str = Field(default="frontpage", description="Feed path on the feed service.")
    count: PositiveInt = Field(default=50, description="Number of entries requested.")
    points: int = Field(default=100, ge=0, description="Minimum story points.")
    comments: int = Field(default=10, ge=0, description="Minimum story comments.")
    timeout_seconds: PositiveFloat = Field(default=30.0, description="Feed fetch timeout.")
    discussion_host: str = Field(
        default="news.ycombinator.com",
        description="Host of the discussion pages referenced by entry GUIDs.",
    )
    user_agent: str = Field(default="hn-mirror/0.1", description="User agent for feed requests.")


class ListingSettings(BaseModel):
    """How the existing-post index is built from subreddit listings."""

    views: list[ListingView] = Field(
        default=[ListingView.NEW, ListingView.HOT, ListingView.TOP],
        description="Listing views merged into the index.",
    )
    limit: PositiveInt = Field(default=100, description="Posts requested per view.")
    top_time_filter: str = Field(default="week", description="Time filter for the top view.")
    retries: PositiveInt = Field(default=2, description="Attempts per listing view.")
    retry_base_delay: float = Field(
        default=0.5, ge=0.0, description="Base delay for exponential backoff."
    )

    @field_validator("views")
    @classmethod
    def require_views(cls, value: list[ListingView]) -> list[ListingView]:
        if not value:
            raise ValueError("At least one listing view must be configured.")
        return list(dict.fromkeys(value))


class MirrorSettings(BaseModel):
    """Duplicate window and error budget of a mirror run."""

    recency_window_hours: PositiveFloat = Field(
        default=48.0, description="Existing posts older than this are ignored."
    )
    max_errors: PositiveInt = Field(
        default=3, description="Posting failures tolerated before a run aborts."
    )
    reply_template: str = Field(
        default="Discussion on HN: {link}",
        description="Body of the reply that links the original discussion.",
    )

    @field_validator("reply_template")
    @classmethod
    def require_link_placeholder(cls, value: str) -> str:
        if "{link}" not in value:
            raise ValueError("reply_template must contain a '{link}' placeholder.")
        try:
            value.format(link="")
        except (IndexError, KeyError, ValueError) as exc:
            raise ValueError(f"reply_template is not a valid format string: {exc!r}") from exc
        return value


class SchedulerSettings(BaseModel):
    """Recurring execution of the mirror job."""

    cron: str = Field(default="*/30 * * * *", description="Crontab expression (UTC).")
    run_on_start: bool = Field(default=True, description="Run once immediately on startup.")


class Settings(BaseSettings):
    """All mirror settings; see the section models for the individual variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    app: AppSettings = AppSettings()
    logging: LoggingSettings = LoggingSettings()
    reddit: RedditSettings = RedditSettings()
    feed: FeedSettings = FeedSettings()
    listing: ListingSettings = ListingSettings()
    mirror: MirrorSettings = MirrorSettings()
    scheduler: SchedulerSettings = SchedulerSettings()


@lru_cache
def get_settings() -> Settings:
    """Settings of this process, loaded once."""

    return Settings()


__all__ = [
    "AppSettings",
    "Environment",
    "FeedSettings",
    "ListingSettings",
    "ListingView",
    "LoggingSettings",
    "MirrorSettings",
    "RedditSettings",
    "SchedulerSettings",
    "Settings",
    "get_settings",
]

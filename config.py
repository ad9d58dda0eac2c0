"""Configuration management with environment variable support."""

import os
from dataclasses import dataclass, field
from typing import Literal


def _parse_cors_origins() -> list[str]:
    """Parse CORS_ORIGINS environment variable."""
    origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000")
    return [o.strip() for o in origins.split(",") if o.strip()]


@dataclass(frozen=True)
class CORSConfig:
    """CORS configuration."""

    allowed_origins: list[str] = field(default_factory=_parse_cors_origins)
    allow_credentials: bool = True
    allow_methods: list[str] = field(default_factory=lambda: ["GET", "POST"])
    allow_headers: list[str] = field(default_factory=lambda: ["*"])


@dataclass(frozen=True)
class RateLimitConfig:
    """Rate limiting configuration."""

    enabled: bool = field(
        default_factory=lambda: os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
    )
    requests_per_minute: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_RPM", "120"))
    )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging configuration for the table server."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    format: Literal["plain", "json"] = field(
        default_factory=lambda: "json" if os.getenv("LOG_FORMAT", "plain").lower() == "json" else "plain"
    )


@dataclass(frozen=True)
class TableConfig:
    """Blackjack table rules."""

    max_players: int = field(default_factory=lambda: int(os.getenv("TABLE_MAX_PLAYERS", "6")))
    reshuffle_threshold: int = 20  # Rebuild the deck below this many cards
    dealer_stands_on: int = 17
    blackjack_payout: tuple[int, int] = (3, 2)
    default_balance: int = field(
        default_factory=lambda: int(os.getenv("TABLE_DEFAULT_BALANCE", "1000"))
    )

    def __post_init__(self) -> None:
        """Validate table rules."""
        if self.max_players < 1:
            raise ValueError("max_players must be at least 1")
        if self.reshuffle_threshold < 0 or self.reshuffle_threshold > 52:
            raise ValueError("reshuffle_threshold must be between 0 and 52")
        numerator, denominator = self.blackjack_payout
        if denominator <= 0 or numerator < denominator:
            raise ValueError("blackjack_payout must pay at least 1:1")
        if self.default_balance < 0:
            raise ValueError("default_balance must not be negative")


@dataclass(frozen=True)
class AppConfig:
    """Application configuration."""

    debug: bool = field(default_factory=lambda: os.getenv("DEBUG", "false").lower() == "true")
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "3001")))

    table: TableConfig = field(default_factory=TableConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Global configuration instance
config = AppConfig()

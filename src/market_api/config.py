"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class ChainSettings(BaseSettings):
    """JSON-RPC endpoint and protocol contract addresses."""

    model_config = SettingsConfigDict(env_prefix="CHAIN_")

    rpc_url: str = "https://bsc-dataseed1.binance.org"
    vault_address: str = "0xeB0E5E1a8500317A1B8fDd195097D5509Ef861de"
    price_feed_address: str = "0x31086dBa211D1e66F51701535AD4C0e0f98A3482"
    money_address: str = "0x4fFe5ec4D8B9822e01c9E49678884bAEc17F60D9"


class SubgraphSettings(BaseSettings):
    """GraphQL indexing service endpoints.

    The stats subgraph carries hourly volume and funding records, the prices
    subgraph carries price candles.
    """

    model_config = SettingsConfigDict(env_prefix="SUBGRAPH_")

    stats_url: str = "https://api.thegraph.com/subgraphs/name/moneyx/moneyx-stats"
    prices_url: str = "https://api.thegraph.com/subgraphs/name/moneyx/moneyx-prices"
    candle_page_size: int = 100
    candle_period: str = "hourly"


class UpstreamSettings(BaseSettings):
    """Per-call bounds applied to every chain and subgraph read."""

    model_config = SettingsConfigDict(env_prefix="UPSTREAM_")

    timeout_seconds: float = 5.0


class MarketSettings(BaseSettings):
    """Market list overrides and synthetic quote policy."""

    model_config = SettingsConfigDict(env_prefix="MARKETS_")

    # JSON list of {"id", "token", "base", "oracle_field"?}; None keeps the built-in list
    definitions: list[dict[str, str]] | None = None
    orderbook_levels: int = 50
    orderbook_policy: Literal["proportional", "fixed"] = "proportional"
    spread_pct: Decimal = Decimal("0.001")  # 0.1% each side of last price
    high_low_band: Decimal = Decimal("0.01")  # price +/- 1% when no candles


class ApiSettings(BaseSettings):
    """HTTP server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 3001


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    chain: ChainSettings = ChainSettings()
    subgraph: SubgraphSettings = SubgraphSettings()
    upstream: UpstreamSettings = UpstreamSettings()
    markets: MarketSettings = MarketSettings()
    api: ApiSettings = ApiSettings()

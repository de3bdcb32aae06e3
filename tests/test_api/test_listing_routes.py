"""Tests for the listing API routes via FastAPI's TestClient.

Components on app.state are mocks or real assemblers over mocked upstreams;
the lifespan is not run.
"""

from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from market_api.api.app import create_app
from market_api.config import MarketSettings
from market_api.exceptions import MarketConfigError, UpstreamUnavailable
from market_api.market_data.funding import FundingRateResolver
from market_api.market_data.high_low import HighLowAggregator
from market_api.market_data.open_interest import OpenInterestAggregator
from market_api.market_data.orderbook import synthesize_book
from market_api.market_data.price_resolver import PriceResolver
from market_api.market_data.ticker_assembler import TickerAssembler, build_ticker
from market_api.market_data.volume import VolumeAggregator
from market_api.models import HighLow, Market, OpenInterestSnapshot, TokenSupply

TICKER_FIELDS = {
    "ticker_id", "base_currency", "target_currency", "last_price", "base_volume",
    "target_volume", "bid", "ask", "high", "low", "product_type", "open_interest",
    "open_interest_usd", "index_price", "index_name", "index_currency", "funding_rate",
    "next_funding_rate", "next_funding_rate_timestamp", "contract_type",
    "contract_price", "contract_price_currency", "start_timestamp", "end_timestamp",
}


def _ticker(market: Market, price: str):
    return build_ticker(
        market,
        Decimal(price),
        OpenInterestSnapshot(long=Decimal("100"), short=Decimal("50")),
        Decimal("1000.00"),
        HighLow(),
        Decimal("0.0001"),
        MarketSettings(),
        now=1700000000,
    )


@pytest.fixture
def assembler(markets: tuple[Market, ...]) -> MagicMock:
    assembler = MagicMock()
    assembler.assemble_all = AsyncMock(
        return_value=[_ticker(m, p) for m, p in zip(markets, ["20000", "3000", "0.08"])]
    )

    async def orderbook(market: Market):
        price = Decimal("20000")
        return price, synthesize_book(price)

    assembler.orderbook = AsyncMock(side_effect=orderbook)
    return assembler


@pytest.fixture
def supply_reader() -> MagicMock:
    reader = MagicMock()
    reader.read_supply = AsyncMock(
        return_value=TokenSupply(total_supply=123_456_789 * 10**18, decimals=18)
    )
    return reader


@pytest.fixture
def client(
    markets: tuple[Market, ...], assembler: MagicMock, supply_reader: MagicMock
) -> TestClient:
    app = create_app()
    app.state.markets = markets
    app.state.assembler = assembler
    app.state.supply_reader = supply_reader
    return TestClient(app)


class TestContracts:
    def test_one_record_per_market_in_order(
        self, client: TestClient, markets: tuple[Market, ...]
    ) -> None:
        resp = client.get("/contracts")

        assert resp.status_code == 200
        body = resp.json()
        assert [t["ticker_id"] for t in body] == [m.id for m in markets]
        assert set(body[0]) == TICKER_FIELDS

    def test_numeric_fields_are_json_numbers(self, client: TestClient) -> None:
        btc = client.get("/contracts").json()[0]

        assert btc["last_price"] == 20000.0
        assert btc["high"] == pytest.approx(20200.0)
        assert btc["low"] == pytest.approx(19800.0)
        assert btc["open_interest_usd"] == 150.0
        assert btc["target_volume"] == 1000.0
        assert btc["target_currency"] == "USD"
        assert btc["product_type"] == "perpetual"
        assert isinstance(btc["next_funding_rate_timestamp"], int)

    def test_catastrophic_failure_is_500(
        self, client: TestClient, assembler: MagicMock
    ) -> None:
        assembler.assemble_all.side_effect = MarketConfigError("market list corrupted")

        resp = client.get("/contracts")

        assert resp.status_code == 500
        assert resp.json() == {"error": "market list corrupted"}


class TestContractSpecs:
    def test_specs_per_market(self, client: TestClient, markets: tuple[Market, ...]) -> None:
        body = client.get("/contract_specs").json()

        assert list(body) == [m.id for m in markets]
        assert body["BTC-PERP"] == {
            "contract_type": "vanilla",
            "contract_price_currency": "USD",
            "contract_price": None,
        }

    def test_idempotent(self, client: TestClient, assembler: MagicMock) -> None:
        first = client.get("/contract_specs").content
        second = client.get("/contract_specs").content

        assert first == second
        assembler.assemble_all.assert_not_awaited()

    def test_html_page_lists_markets(self, client: TestClient) -> None:
        resp = client.get("/contract_specs.html")

        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "BTC-PERP" in resp.text
        assert "DOGE-PERP" in resp.text


class TestOrderbook:
    def test_unknown_ticker_is_400(self, client: TestClient) -> None:
        resp = client.get("/orderbook", params={"ticker_id": "UNKNOWN-PERP"})

        assert resp.status_code == 400
        assert resp.json()["error"]

    def test_missing_ticker_is_400(self, client: TestClient) -> None:
        assert client.get("/orderbook").status_code == 400

    def test_fifty_levels_each_side(self, client: TestClient) -> None:
        resp = client.get("/orderbook", params={"ticker_id": "BTC-PERP"})

        assert resp.status_code == 200
        body = resp.json()
        assert body["ticker_id"] == "BTC-PERP"
        assert isinstance(body["timestamp"], int)
        assert body["timestamp"] > 1_600_000_000_000  # milliseconds
        assert len(body["bids"]) == len(body["asks"]) == 50
        assert body["bids"][0] == [19990.0, 1.0]
        assert body["bids"][49] == [19500.0, 1.0]
        assert body["asks"][49] == [20500.0, 1.0]

    def test_depth_parameter(self, client: TestClient) -> None:
        body = client.get("/orderbook", params={"ticker_id": "ETH-PERP", "depth": 5}).json()
        assert len(body["bids"]) == len(body["asks"]) == 5

    @pytest.mark.parametrize("depth", ["0", "51", "-3", "ten"])
    def test_unknown_ticker_wins_over_bad_depth(self, client: TestClient, depth: str) -> None:
        resp = client.get("/orderbook", params={"ticker_id": "UNKNOWN-PERP", "depth": depth})

        assert resp.status_code == 400
        assert resp.json() == {"error": "Invalid ticker_id"}

    @pytest.mark.parametrize("depth", ["0", "51", "-3", "ten"])
    def test_bad_depth_is_400_with_error(
        self, client: TestClient, assembler: MagicMock, depth: str
    ) -> None:
        resp = client.get("/orderbook", params={"ticker_id": "BTC-PERP", "depth": depth})

        assert resp.status_code == 400
        assert "depth" in resp.json()["error"]
        assembler.orderbook.assert_not_awaited()

    def test_unresolved_price_still_fifty_levels(
        self, client: TestClient, assembler: MagicMock
    ) -> None:
        async def orderbook(market: Market):
            return Decimal("0"), synthesize_book(Decimal("0"))

        assembler.orderbook.side_effect = orderbook

        body = client.get("/orderbook", params={"ticker_id": "BTC-PERP"}).json()

        assert len(body["bids"]) == len(body["asks"]) == 50
        assert all(price > 0 for price, _ in body["bids"])


class TestSupply:
    def test_supply_is_string_encoded(self, client: TestClient) -> None:
        body = client.get("/supply/money").json()

        assert body["total_supply"] == str(123_456_789 * 10**18)
        assert body["circulating_supply"] == body["total_supply"]
        assert body["decimals"] == 18
        assert int(body["total_supply"]) >= 0
        assert int(body["total_supply"]) // 10 ** body["decimals"] == 123_456_789

    def test_unreachable_token_is_503(
        self, client: TestClient, supply_reader: MagicMock
    ) -> None:
        supply_reader.read_supply.side_effect = UpstreamUnavailable("totalSupply timed out")

        resp = client.get("/supply/money")

        assert resp.status_code == 503
        assert resp.json()["error"]


class TestHealth:
    @pytest.mark.parametrize("path", ["/", "/health"])
    def test_liveness(self, client: TestClient, assembler: MagicMock, path: str) -> None:
        body = client.get(path).json()

        assert body["status"] == "ok"
        assert isinstance(body["timestamp"], int)
        assembler.assemble_all.assert_not_awaited()


class TestDegradedUpstreams:
    """Real assembler wired to upstream mocks that all fail."""

    def test_every_market_listed_with_defaults(
        self,
        markets: tuple[Market, ...],
        mock_reader: AsyncMock,
        mock_subgraph: AsyncMock,
    ) -> None:
        for name in ("get_price_v2", "get_price", "get_guaranteed_usd", "get_global_short_size"):
            setattr(mock_reader, name, AsyncMock(side_effect=UpstreamUnavailable("rpc down")))
        mock_subgraph.query = AsyncMock(side_effect=UpstreamUnavailable("subgraph down"))

        assembler = TickerAssembler(
            price_resolver=PriceResolver.from_reader(mock_reader, timeout=0.1),
            open_interest=OpenInterestAggregator(mock_reader),
            volume=VolumeAggregator(mock_subgraph, "https://subgraph.test/stats"),
            high_low=HighLowAggregator(mock_subgraph, "https://subgraph.test/prices"),
            funding=FundingRateResolver(mock_subgraph, "https://subgraph.test/stats"),
            settings=MarketSettings(),
            timeout=0.1,
        )
        app = create_app()
        app.state.markets = markets
        app.state.assembler = assembler
        client = TestClient(app)

        resp = client.get("/contracts")

        assert resp.status_code == 200
        body = resp.json()
        assert [t["ticker_id"] for t in body] == [m.id for m in markets]
        for ticker in body:
            assert ticker["last_price"] == 0.0
            assert ticker["open_interest_usd"] == 0.0
            assert ticker["target_volume"] == 0.0
            assert ticker["funding_rate"] == 0.0

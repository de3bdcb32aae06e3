"""GraphQL documents for the stats and prices subgraphs.

Token ids are lowercase hex addresses. Amounts and prices are BigInt
strings on the 10**30 scale.
"""

VOLUME_BY_TOKEN_QUERY = """
query volumeByToken($token: String!, $from: Int!, $first: Int!) {
  asTokenA: hourlyVolumeByTokens(
    first: $first
    where: { tokenA: $token, timestamp_gte: $from }
  ) {
    margin
    swap
    liquidation
    mint
    burn
  }
  asTokenB: hourlyVolumeByTokens(
    first: $first
    where: { tokenB: $token, timestamp_gte: $from }
  ) {
    margin
    swap
    liquidation
    mint
    burn
  }
}
"""

PRICE_CANDLES_QUERY = """
query priceCandles($token: String!, $from: Int!, $period: String!, $first: Int!) {
  priceCandles(
    first: $first
    orderBy: timestamp
    orderDirection: desc
    where: { token: $token, period: $period, timestamp_gte: $from }
  ) {
    timestamp
    high
    low
  }
}
"""

LATEST_FUNDING_RATE_QUERY = """
query latestFundingRate($token: String!) {
  fundingRates(
    first: 1
    orderBy: timestamp
    orderDirection: desc
    where: { token: $token }
  ) {
    timestamp
    startFundingRate
    endFundingRate
  }
}
"""

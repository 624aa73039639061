"""
Token and pool classification for DEX swap analysis.

Maps a pool id to its two token symbols, sorts tokens into major /
protocol (defi) / other, and converts raw integer amounts into a common
unit of account (SUI equivalent).

Lookup tables are supplied by a TokenMetadataProvider injected at
construction. StaticTokenMetadata is the default: a fixed table of the
most-traded Cetus pools with static decimals and conversion rates. The
rates are rough approximations for comparing trade sizes, not live prices.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Protocol, Sequence

from swap_insights.analysis_engine.statistics import frequency_distribution
from swap_insights.insights_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_TOKEN = "UNKNOWN"
DEFAULT_DECIMALS = 9
DEFAULT_RATE = 1.0
COMMON_UNIT = "SUI"

CATEGORY_MAJOR = "major"
CATEGORY_DEFI = "defi"
CATEGORY_OTHER = "other"

# Stablecoins and the network gas token
DEFAULT_MAJOR_TOKENS = frozenset({"SUI", "USDC", "USDT"})
# Recognized DeFi governance / utility tokens
DEFAULT_PROTOCOL_TOKENS = frozenset({"CETUS", "DEEP", "WAL"})


@dataclass(frozen=True)
class PoolInfo:
    pool_id: str
    token_a: str
    token_b: str
    display_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "poolId": self.pool_id,
            "tokenA": self.token_a,
            "tokenB": self.token_b,
            "displayName": self.display_name,
        }


@dataclass(frozen=True)
class SwapDirection:
    """token_in is the token sold, token_out the token bought."""

    token_in: str
    token_out: str


@dataclass
class TokenCategories:
    major: list[str] = field(default_factory=list)
    defi: list[str] = field(default_factory=list)
    other: list[str] = field(default_factory=list)


@dataclass
class TokenCount:
    token: str
    count: int
    percentage: float


@dataclass
class PoolCount:
    pool: str
    display_name: str
    count: int
    percentage: float


class TokenMetadataProvider(Protocol):
    """Source of pool composition, token decimals, and common-unit rates. None = unknown."""

    def pool_info(self, pool_id: str) -> PoolInfo | None: ...

    def decimals(self, symbol: str) -> int | None: ...

    def rate(self, symbol: str) -> float | None: ...


def _pool(pool_id: str, token_a: str, token_b: str) -> PoolInfo:
    return PoolInfo(pool_id, token_a, token_b, f"{token_a}/{token_b}")


KNOWN_POOLS: dict[str, PoolInfo] = {
    p.pool_id: p
    for p in (
        _pool("0xcf994611fd4c48e277ce3ffd4d4364c914af2c3cbb05f7bf6facd371de688630", "SUI", "USDC"),
        _pool("0x5b0b24c27ccf6d0e98f3a8704d2e577de83fa574d3a9060eb8945eeb82b3e2df", "CETUS", "SUI"),
        _pool("0x2e041f3fd93646dcc877f783c1f2b7fa62d30271bdef1f21ef002cebf857bded", "CETUS", "SUI"),
        _pool("0xc8d7a1503dc2f9f5b05449a87d8733593e2f0f3e7bffd90541252782e4d2ca20", "USDC", "USDT"),
    )
}

TOKEN_DECIMALS: dict[str, int] = {
    "SUI": 9,
    "USDC": 6,
    "USDT": 6,
    "CETUS": 9,
}

# SUI-equivalent per whole token. Stablecoins are treated as 1:1 with SUI.
CONVERSION_RATES: dict[str, float] = {
    "SUI": 1.0,
    "USDC": 1.0,
    "USDT": 1.0,
    "CETUS": 0.025,
}


class StaticTokenMetadata:
    """
    Table-backed TokenMetadataProvider.

    Starts from the built-in pool / decimals / rate tables; any mapping passed
    in is merged on top so deployments can add pools or correct rates.
    """

    def __init__(
        self,
        pools: Mapping[str, PoolInfo] | None = None,
        decimals: Mapping[str, int] | None = None,
        rates: Mapping[str, float] | None = None,
    ) -> None:
        self._pools = {**KNOWN_POOLS, **(pools or {})}
        self._decimals = {**TOKEN_DECIMALS, **(decimals or {})}
        self._rates = {**CONVERSION_RATES, **(rates or {})}

    def pool_info(self, pool_id: str) -> PoolInfo | None:
        return self._pools.get(pool_id)

    def decimals(self, symbol: str) -> int | None:
        return self._decimals.get(symbol)

    def rate(self, symbol: str) -> float | None:
        return self._rates.get(symbol)


class TokenClassifier:
    """Pool -> tokens lookup, token categories, and amount normalization."""

    def __init__(
        self,
        provider: TokenMetadataProvider | None = None,
        major_tokens: Iterable[str] = DEFAULT_MAJOR_TOKENS,
        protocol_tokens: Iterable[str] = DEFAULT_PROTOCOL_TOKENS,
    ) -> None:
        self.provider = provider or StaticTokenMetadata()
        self.major_tokens = frozenset(major_tokens)
        self.protocol_tokens = frozenset(protocol_tokens)

    def pool_info(self, pool_id: str) -> PoolInfo:
        """Known pool info, or a fallback labelled from the id prefix with UNKNOWN tokens."""
        known = self.provider.pool_info(pool_id)
        if known is not None:
            return known
        return PoolInfo(
            pool_id=pool_id,
            token_a=UNKNOWN_TOKEN,
            token_b=UNKNOWN_TOKEN,
            display_name=f"Pool:{pool_id[:8]}...",
        )

    def tokens_from_pool(self, pool_id: str) -> tuple[str, str]:
        info = self.pool_info(pool_id)
        return (info.token_a, info.token_b)

    def pool_display_name(self, pool_id: str) -> str:
        return self.pool_info(pool_id).display_name

    def swap_direction(self, pool_id: str, atob: bool) -> SwapDirection:
        """atob=True sells token A for token B; False sells B for A."""
        info = self.pool_info(pool_id)
        if atob:
            return SwapDirection(token_in=info.token_a, token_out=info.token_b)
        return SwapDirection(token_in=info.token_b, token_out=info.token_a)

    def is_major(self, symbol: str) -> bool:
        return symbol in self.major_tokens

    def is_protocol(self, symbol: str) -> bool:
        return symbol in self.protocol_tokens

    def categorize_token(self, symbol: str) -> str:
        if self.is_major(symbol):
            return CATEGORY_MAJOR
        if self.is_protocol(symbol):
            return CATEGORY_DEFI
        return CATEGORY_OTHER

    def categorize_tokens(self, symbols: Iterable[str]) -> TokenCategories:
        categories = TokenCategories()
        for symbol in symbols:
            getattr(categories, self.categorize_token(symbol)).append(symbol)
        return categories

    def normalize_amount(self, amount: str, symbol: str) -> float:
        """Raw smallest-unit integer string -> whole tokens. Unparseable amounts count as 0."""
        decimals = self.provider.decimals(symbol)
        if decimals is None:
            decimals = DEFAULT_DECIMALS
        try:
            raw = int(str(amount).strip())
        except (TypeError, ValueError):
            logger.debug("token_amount_unparseable", amount=str(amount)[:32], token=symbol)
            return 0.0
        return raw / 10 ** decimals

    def to_common_unit(self, amount: str, symbol: str) -> float:
        """Approximate SUI-equivalent of a raw amount using the static rate table."""
        rate = self.provider.rate(symbol)
        if rate is None:
            rate = DEFAULT_RATE
        return self.normalize_amount(amount, symbol) * rate

    def token_preferences(self, pool_ids: Sequence[str]) -> list[TokenCount]:
        """Token occurrence counts across pools (each pool id contributes both of its tokens)."""
        tokens = [t for pool_id in pool_ids for t in self.tokens_from_pool(pool_id)]
        return [
            TokenCount(token=e.value, count=e.count, percentage=e.percentage)
            for e in frequency_distribution(tokens)
        ]

    def pool_preferences(self, pool_ids: Sequence[str]) -> list[PoolCount]:
        return [
            PoolCount(
                pool=e.value,
                display_name=self.pool_display_name(e.value),
                count=e.count,
                percentage=e.percentage,
            )
            for e in frequency_distribution(list(pool_ids))
        ]

    def format_token_amount(self, amount: str, symbol: str) -> str:
        normalized = self.normalize_amount(amount, symbol)
        if normalized >= 1e6:
            return f"{normalized / 1e6:.2f}M {symbol}"
        if normalized >= 1e3:
            return f"{normalized / 1e3:.2f}K {symbol}"
        return f"{normalized:.2f} {symbol}"

    def format_common_unit(self, amount: str, symbol: str) -> str:
        return f"{self.to_common_unit(amount, symbol):.2f} {COMMON_UNIT} equiv"

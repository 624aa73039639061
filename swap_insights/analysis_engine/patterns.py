"""
Swap pattern analyzer: wallet swap history -> TradingPatterns profile.

Works from swap events alone (no external price data): token and pool
preferences, position-sizing consistency, trading rhythm, UTC timing,
a synthesized trading personality, and a short list of insights.

Each section is an independent pass over the full swap set. Thin data
degrades to defined fallbacks (empty profile, "Insufficient data" rhythm)
instead of raising. The only non-deterministic field is analysis_date,
taken from the injected clock.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

from swap_insights.analysis_engine.models import (
    CONFIDENCE_HIGH,
    CONFIDENCE_LOW,
    CONFIDENCE_MEDIUM,
    CONSISTENCY_CONSISTENT,
    CONSISTENCY_HIGHLY_VARIED,
    CONSISTENCY_VARIED,
    CONSISTENCY_VERY_CONSISTENT,
    STYLE_ACTIVE,
    STYLE_HIGH_FREQUENCY,
    STYLE_MODERATE,
    STYLE_OCCASIONAL,
    DataQuality,
    PeriodShare,
    PoolPreferences,
    PoolShare,
    SwapEvent,
    TimingPatterns,
    TokenCategoryShares,
    TokenPreferences,
    TokenShare,
    TradeSizing,
    TradingPatterns,
    TradingRhythm,
)
from swap_insights.analysis_engine.statistics import (
    DAY_NAMES,
    MS_PER_HOUR,
    coefficient_of_variation,
    format_hour,
    frequency_distribution,
    herfindahl_index,
    mean,
    round_half_up,
    time_period,
)
from swap_insights.analysis_engine.tokens import COMMON_UNIT, TokenClassifier
from swap_insights.insights_logging import get_logger, short_wallet

logger = get_logger(__name__)

Clock = Callable[[], datetime]

HIGH_CONFIDENCE_MIN_SWAPS = 50
MEDIUM_CONFIDENCE_MIN_SWAPS = 20

# Coefficient of variation upper bounds (exclusive) per consistency tier
VERY_CONSISTENT_MAX_CV = 0.3
CONSISTENT_MAX_CV = 0.6
VARIED_MAX_CV = 1.0

# Mean days between trades, upper bounds (exclusive) per style
HIGH_FREQUENCY_MAX_DAYS = 0.5
ACTIVE_MAX_DAYS = 2.0
MODERATE_MAX_DAYS = 7.0

TOP_TOKENS = 5
TOP_POOLS = 3
TYPICAL_RANGE_BAND = 0.3

MAJOR_FOCUS_MIN_PCT = 80
PROTOCOL_FOCUS_MIN_PCT = 30

STYLE_LABELS = {
    STYLE_HIGH_FREQUENCY: "High-Frequency",
    STYLE_ACTIVE: "Active",
    STYLE_MODERATE: "Moderate",
    STYLE_OCCASIONAL: "Occasional",
}

PERIOD_LATE_NIGHT = "Late Night (0-6 UTC)"
PERIOD_MORNING = "Morning (6-12 UTC)"
PERIOD_AFTERNOON = "Afternoon (12-18 UTC)"
PERIOD_EVENING = "Evening (18-24 UTC)"

NO_ACTIVITY_PERSONALITY = "No Trading Activity Detected"
NO_ACTIVITY_INSIGHT = "No swap activity found for this wallet"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_analysis_date(moment: datetime) -> str:
    """ISO 8601 UTC with millisecond precision and Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def classify_confidence(swap_count: int) -> str:
    if swap_count >= HIGH_CONFIDENCE_MIN_SWAPS:
        return CONFIDENCE_HIGH
    if swap_count >= MEDIUM_CONFIDENCE_MIN_SWAPS:
        return CONFIDENCE_MEDIUM
    return CONFIDENCE_LOW


def classify_consistency(cv: float) -> str:
    """Coefficient of variation -> consistency tier. Each threshold starts the next tier."""
    if cv < VERY_CONSISTENT_MAX_CV:
        return CONSISTENCY_VERY_CONSISTENT
    if cv < CONSISTENT_MAX_CV:
        return CONSISTENCY_CONSISTENT
    if cv < VARIED_MAX_CV:
        return CONSISTENCY_VARIED
    return CONSISTENCY_HIGHLY_VARIED


def classify_trading_style(avg_days_between: float) -> str:
    if avg_days_between < HIGH_FREQUENCY_MAX_DAYS:
        return STYLE_HIGH_FREQUENCY
    if avg_days_between < ACTIVE_MAX_DAYS:
        return STYLE_ACTIVE
    if avg_days_between < MODERATE_MAX_DAYS:
        return STYLE_MODERATE
    return STYLE_OCCASIONAL


def time_bucket(hour: int) -> str:
    """UTC hour 0-23 -> one of four fixed 6-hour periods."""
    if hour < 6:
        return PERIOD_LATE_NIGHT
    if hour < 12:
        return PERIOD_MORNING
    if hour < 18:
        return PERIOD_AFTERNOON
    return PERIOD_EVENING


def _format_span(days: float) -> str:
    if days < 1:
        return f"{days * 24:.1f} hours"
    return f"{days:.1f} days"


def _utc(timestamp_ms: int) -> datetime:
    return datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)


class SwapPatternAnalyzer:
    """
    Builds TradingPatterns from a wallet's swaps.

    Args:
        classifier: Token/pool lookups; defaults to the static Cetus tables.
        clock: Returns the current aware datetime; stamps analysis_date.
    """

    def __init__(
        self,
        classifier: TokenClassifier | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.classifier = classifier or TokenClassifier()
        self.clock = clock or utc_now

    def analyze_patterns(self, wallet: str, swaps: Sequence[SwapEvent]) -> TradingPatterns:
        analysis_date = format_analysis_date(self.clock())
        if len(swaps) == 0:
            logger.debug("pattern_analysis_empty", wallet=short_wallet(wallet))
            return self.empty_patterns(wallet, analysis_date)

        data_quality = self.assess_data_quality(swaps)
        token_preferences = self.analyze_token_preferences(swaps)
        pool_preferences = self.analyze_pool_preferences(swaps)
        trading_sizing = self.analyze_trade_sizing(swaps)
        trading_rhythm = self.analyze_trading_rhythm(swaps)
        timing_patterns = self.analyze_timing_patterns(swaps)

        personality = self.determine_trading_personality(token_preferences, trading_rhythm)
        insights = self.generate_key_insights(
            token_preferences,
            pool_preferences,
            trading_sizing,
            trading_rhythm,
            timing_patterns,
            data_quality,
        )

        logger.debug(
            "pattern_analysis_done",
            wallet=short_wallet(wallet),
            swap_count=data_quality.total_swaps,
            confidence=data_quality.data_confidence,
            trading_style=trading_rhythm.trading_style,
        )
        return TradingPatterns(
            wallet=wallet,
            analysis_date=analysis_date,
            data_quality=data_quality,
            token_preferences=token_preferences,
            pool_preferences=pool_preferences,
            trading_sizing=trading_sizing,
            trading_rhythm=trading_rhythm,
            timing_patterns=timing_patterns,
            trading_personality=personality,
            key_insights=insights,
        )

    def assess_data_quality(self, swaps: Sequence[SwapEvent]) -> DataQuality:
        period = time_period([s.timestamp for s in swaps])
        if period.days > 1:
            time_range = f"{round_half_up(period.days)} days"
        else:
            time_range = f"{period.hours:.1f} hours"
        return DataQuality(
            total_swaps=len(swaps),
            time_range=time_range,
            data_confidence=classify_confidence(len(swaps)),
        )

    def analyze_token_preferences(self, swaps: Sequence[SwapEvent]) -> TokenPreferences:
        pool_ids = [s.pool for s in swaps]
        occurrences = [t for pool_id in pool_ids for t in self.classifier.tokens_from_pool(pool_id)]
        # Category shares are over distinct tokens, not occurrences
        distinct = list(dict.fromkeys(occurrences))
        categories = self.classifier.categorize_tokens(distinct)
        total = len(distinct)

        favorites = self.classifier.token_preferences(pool_ids)[:TOP_TOKENS]
        concentration = herfindahl_index(occurrences)
        return TokenPreferences(
            favorite_tokens=[
                TokenShare(token=t.token, percentage=round_half_up(t.percentage)) for t in favorites
            ],
            diversification=round_half_up(1 - concentration, 2),
            token_categories=TokenCategoryShares(
                major=round_half_up(len(categories.major) / total * 100),
                defi=round_half_up(len(categories.defi) / total * 100),
                other=round_half_up(len(categories.other) / total * 100),
            ),
        )

    def analyze_pool_preferences(self, swaps: Sequence[SwapEvent]) -> PoolPreferences:
        pools = self.classifier.pool_preferences([s.pool for s in swaps])
        return PoolPreferences(
            favorite_pools=[
                PoolShare(display_name=p.display_name, percentage=round_half_up(p.percentage))
                for p in pools[:TOP_POOLS]
            ],
            pool_count=len(pools),
        )

    def trade_sizes(self, swaps: Sequence[SwapEvent]) -> list[float]:
        """Input-side amount of each swap in the common unit (side picked by atob)."""
        sizes: list[float] = []
        for swap in swaps:
            direction = self.classifier.swap_direction(swap.pool, swap.atob)
            sizes.append(self.classifier.to_common_unit(swap.amount_in, direction.token_in))
        return sizes

    def analyze_trade_sizing(self, swaps: Sequence[SwapEvent]) -> TradeSizing:
        sizes = self.trade_sizes(swaps)
        avg = mean(sizes)
        low = round_half_up(avg * (1 - TYPICAL_RANGE_BAND))
        high = round_half_up(avg * (1 + TYPICAL_RANGE_BAND))
        return TradeSizing(
            average_trade_size=f"{round_half_up(avg)} {COMMON_UNIT} equiv",
            typical_range=f"{low}-{high} {COMMON_UNIT} equiv",
            consistency=classify_consistency(coefficient_of_variation(sizes)),
        )

    def analyze_trading_rhythm(self, swaps: Sequence[SwapEvent]) -> TradingRhythm:
        if len(swaps) < 2:
            return TradingRhythm(
                frequency="Insufficient data",
                average_time_between_trades="N/A",
                trading_style=STYLE_OCCASIONAL,
            )

        timestamps = sorted(s.timestamp for s in swaps)
        gaps_hours = [(b - a) / MS_PER_HOUR for a, b in zip(timestamps, timestamps[1:])]
        avg_hours = mean(gaps_hours)
        avg_days = avg_hours / 24

        if avg_days < 1:
            average_gap = f"{avg_hours:.1f} hours"
        else:
            average_gap = f"{avg_days:.1f} days"
        return TradingRhythm(
            frequency=f"{len(swaps)} swaps over {_format_span(avg_days * (len(swaps) - 1))}",
            average_time_between_trades=average_gap,
            trading_style=classify_trading_style(avg_days),
        )

    def analyze_timing_patterns(self, swaps: Sequence[SwapEvent]) -> TimingPatterns:
        moments = [_utc(s.timestamp) for s in swaps]
        hours = [m.hour for m in moments]
        # isoweekday: Monday=1 .. Sunday=7 -> Sunday=0 .. Saturday=6
        days = [m.isoweekday() % 7 for m in moments]

        hour_dist = frequency_distribution(hours)
        day_dist = frequency_distribution(days)
        top_hour = hour_dist[0].value if hour_dist else 0
        top_day = day_dist[0].value if day_dist else 0

        periods = frequency_distribution([time_bucket(h) for h in hours])
        return TimingPatterns(
            most_active_hour=format_hour(top_hour),
            most_active_day=DAY_NAMES[top_day],
            time_distribution=[
                PeriodShare(period=p.value, percentage=round_half_up(p.percentage)) for p in periods
            ],
        )

    def determine_trading_personality(
        self,
        token_preferences: TokenPreferences,
        trading_rhythm: TradingRhythm,
    ) -> str:
        base = STYLE_LABELS.get(trading_rhythm.trading_style, STYLE_LABELS[STYLE_OCCASIONAL])
        favorites = token_preferences.favorite_tokens
        top_token = favorites[0].token if favorites else "Token"
        categories = token_preferences.token_categories

        if categories.major >= MAJOR_FOCUS_MIN_PCT:
            return f"{base} {top_token} Trader (Major Token Focus)"
        if categories.defi >= PROTOCOL_FOCUS_MIN_PCT:
            return f"{base} DeFi Trader ({top_token} + Protocol Tokens)"
        return f"{base} Diversified Trader ({top_token} Primary)"

    def generate_key_insights(
        self,
        token_preferences: TokenPreferences,
        pool_preferences: PoolPreferences,
        trading_sizing: TradeSizing,
        trading_rhythm: TradingRhythm,
        timing_patterns: TimingPatterns,
        data_quality: DataQuality,
    ) -> list[str]:
        insights: list[str] = []

        if token_preferences.favorite_tokens:
            top = token_preferences.favorite_tokens[0]
            insights.append(f"Prefers trading {top.token} ({top.percentage}% of trades)")

        if pool_preferences.favorite_pools:
            top_pool = pool_preferences.favorite_pools[0]
            insights.append(
                f"Most active in {top_pool.display_name} pool ({top_pool.percentage}% of trades)"
            )

        insights.append(
            f"Typical trade size: {trading_sizing.average_trade_size} ({trading_sizing.consistency})"
        )

        gap = trading_rhythm.average_time_between_trades
        if trading_rhythm.trading_style == STYLE_HIGH_FREQUENCY:
            insights.append(f"Very active trader - {gap} between trades")
        else:
            insights.append(f"{trading_rhythm.trading_style} trading pace - {gap} between trades")

        if timing_patterns.time_distribution:
            top_period = timing_patterns.time_distribution[0]
            insights.append(
                f"Most active during {top_period.period} ({top_period.percentage}% of trades)"
            )

        if data_quality.data_confidence == CONFIDENCE_LOW:
            insights.append(
                f"Limited data ({data_quality.total_swaps} swaps) - patterns may not be representative"
            )
        return insights

    def empty_patterns(self, wallet: str, analysis_date: str) -> TradingPatterns:
        return TradingPatterns(
            wallet=wallet,
            analysis_date=analysis_date,
            data_quality=DataQuality(total_swaps=0, time_range="No data", data_confidence=CONFIDENCE_LOW),
            token_preferences=TokenPreferences(
                favorite_tokens=[],
                diversification=0,
                token_categories=TokenCategoryShares(),
            ),
            pool_preferences=PoolPreferences(favorite_pools=[], pool_count=0),
            trading_sizing=TradeSizing(
                average_trade_size="No data",
                typical_range="No data",
                consistency=CONSISTENCY_VARIED,
            ),
            trading_rhythm=TradingRhythm(
                frequency="No trades found",
                average_time_between_trades="N/A",
                trading_style=STYLE_OCCASIONAL,
            ),
            timing_patterns=TimingPatterns(
                most_active_hour="N/A",
                most_active_day="N/A",
                time_distribution=[],
            ),
            trading_personality=NO_ACTIVITY_PERSONALITY,
            key_insights=[NO_ACTIVITY_INSIGHT],
        )


_default_analyzer = SwapPatternAnalyzer()


def analyze_patterns(wallet: str, swaps: Sequence[SwapEvent]) -> TradingPatterns:
    """Analyze with the default static classifier and wall clock."""
    return _default_analyzer.analyze_patterns(wallet, swaps)

"""Prometheus metrics definitions and helpers"""
import logging
from typing import Optional

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

from hapien.config import ENABLE_PROMETHEUS

logger = logging.getLogger(__name__)


class PrometheusMetrics:
    """Container for all gamification Prometheus metrics"""

    def __init__(self, enabled: bool = ENABLE_PROMETHEUS, registry: Optional[CollectorRegistry] = None):
        if not enabled:
            logger.info("Prometheus metrics disabled")
            self._enabled = False
            return

        registry = registry or REGISTRY

        try:
            # XP Metrics
            self.xp_awarded_total = Counter(
                'gamification_xp_awarded_total',
                'Total XP awarded',
                ['source'],
                registry=registry
            )

            self.xp_award_size = Histogram(
                'gamification_xp_award_size',
                'XP per award',
                ['source'],
                buckets=[10, 25, 50, 100, 250, 500, 1000, 2500, 5000],
                registry=registry
            )

            # Progression Metrics
            self.level_ups_total = Counter(
                'gamification_level_ups_total',
                'Total level-ups',
                ['new_level'],
                registry=registry
            )

            self.achievement_tier_ups_total = Counter(
                'gamification_achievement_tier_ups_total',
                'Total achievement tier-ups',
                ['achievement', 'tier'],
                registry=registry
            )

            # Streak Metrics
            self.streak_events_total = Counter(
                'gamification_streak_events_total',
                'Streak starts, continuations, breaks and milestones',
                ['streak_type', 'event'],
                registry=registry
            )

            # Mystery Metrics
            self.mystery_events_total = Counter(
                'gamification_mystery_events_total',
                'Triggered mystery events',
                ['event_type'],
                registry=registry
            )

            self._enabled = True
            logger.info("Prometheus metrics initialized")

        except ValueError as e:
            # Duplicate registration in the target registry
            logger.error(f"Failed to initialize Prometheus metrics: {e}", exc_info=True)
            self._enabled = False

    @property
    def enabled(self) -> bool:
        """Check if metrics are enabled"""
        return self._enabled


# Global metrics instance
metrics = PrometheusMetrics()


def track_xp_award(source: str, amount: int, target: Optional[PrometheusMetrics] = None):
    """Track an XP award"""
    target = target or metrics
    if not target.enabled or amount <= 0:
        return

    target.xp_awarded_total.labels(source=source).inc(amount)
    target.xp_award_size.labels(source=source).observe(amount)


def track_level_up(new_level: int, target: Optional[PrometheusMetrics] = None):
    """Track a level-up"""
    target = target or metrics
    if not target.enabled:
        return

    target.level_ups_total.labels(new_level=str(new_level)).inc()


def track_achievement_tier_up(achievement_key: str, tier: str, target: Optional[PrometheusMetrics] = None):
    """Track an achievement tier-up"""
    target = target or metrics
    if not target.enabled:
        return

    target.achievement_tier_ups_total.labels(achievement=achievement_key, tier=tier).inc()


def track_streak_event(streak_type: str, event: str, target: Optional[PrometheusMetrics] = None):
    """Track a streak event (started, continued, broken, milestone)"""
    target = target or metrics
    if not target.enabled:
        return

    target.streak_events_total.labels(streak_type=streak_type, event=event).inc()


def track_mystery_event(event_type: str, target: Optional[PrometheusMetrics] = None):
    """Track a triggered mystery event"""
    target = target or metrics
    if not target.enabled:
        return

    target.mystery_events_total.labels(event_type=event_type).inc()

from ghworld.analysis.profile.profiles import ProfileAnalytics
from ghworld.analysis.stats.aggregator import StatsAggregator

__all__ = ['ProfileAnalytics', 'StatsAggregator']

"""Models module."""

from .analysis import (
    MediaPayload, UserPreferences, AnalysisContext, AnalysisInput, AnalysisType, AnalyzeRequest,
    ActivityType, Duration, CalorieEstimate, Macros, FoodItem, ExerciseSet,
    ActivityInsights, NutritionalInfo, HealthActivityResult,
)
from .coaching import (
    ProcessedHealthData, InsightsRequest, DailyInsights,
    RecentActivity, UserProfile, TimeContext, SuggestionInput, SuggestionsRequest, SuggestionSet,
)

__all__ = [
    'MediaPayload', 'UserPreferences', 'AnalysisContext', 'AnalysisInput', 'AnalysisType', 'AnalyzeRequest',
    'ActivityType', 'Duration', 'CalorieEstimate', 'Macros', 'FoodItem', 'ExerciseSet',
    'ActivityInsights', 'NutritionalInfo', 'HealthActivityResult',
    'ProcessedHealthData', 'InsightsRequest', 'DailyInsights',
    'RecentActivity', 'UserProfile', 'TimeContext', 'SuggestionInput', 'SuggestionsRequest', 'SuggestionSet',
]

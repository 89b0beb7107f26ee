"""
Coaching Data Models - daily insights over processed metrics and
personalized suggestions over recent activities.
"""

from typing import Dict, List, Literal, Optional

from pydantic import Field

from .analysis import CamelModel, Confidence

Priority = Literal["low", "medium", "high"]
TimeOfDay = Literal["morning", "afternoon", "evening", "night"]
SuggestionFocus = Literal["workout", "meal", "general", "recovery", "nutrition"]


# ---------------------------------------------------------------------------
# Daily insights
# ---------------------------------------------------------------------------

class CalorieDeficitMetric(CamelModel):
    value: float
    bmr: float
    tdee: float
    workout_calories: float
    food_calories: float
    percentage: float


class ProteinMetric(CamelModel):
    consumed: float
    goal: float
    percentage: float
    sources: List[str] = Field(default_factory=list)


class StepsMetric(CamelModel):
    count: int
    goal: int
    percentage: float
    estimated: bool = False


class ExerciseMetric(CamelModel):
    duration: float = Field(description="Minutes of exercise")
    goal: float
    percentage: float
    workout_count: int
    types: List[str] = Field(default_factory=list)


class DailyMetrics(CamelModel):
    calorie_deficit: CalorieDeficitMetric
    protein: ProteinMetric
    steps: StepsMetric
    exercise: ExerciseMetric


class DailyActivities(CamelModel):
    """Raw activity records grouped by kind; only the counts reach the prompt."""
    meals: List[Dict] = Field(default_factory=list)
    workouts: List[Dict] = Field(default_factory=list)
    other: List[Dict] = Field(default_factory=list)


class DailyGoals(CamelModel):
    meals_logged: bool = False
    workout_completed: bool = False
    protein_target: bool = False
    calorie_deficit: bool = False


class ProcessedHealthData(CamelModel):
    """One day of already-aggregated health metrics."""
    date: str
    metrics: DailyMetrics
    activities: DailyActivities = Field(default_factory=DailyActivities)
    goals: DailyGoals = Field(default_factory=DailyGoals)


class InsightsRequest(CamelModel):
    processed_data: Optional[ProcessedHealthData] = None
    profile: Optional[Dict] = None


class Insight(CamelModel):
    type: Literal["nutrition", "exercise", "calories", "habits", "motivation"]
    message: str
    priority: Priority
    actionable: bool
    time_relevant: bool


class DaySummary(CamelModel):
    overall_score: float = Field(ge=0, le=100)
    key_win: str
    main_improvement: str
    motivational_message: str


class MetricTrend(CamelModel):
    metric: str
    direction: Literal["improving", "declining", "stable"]
    confidence: Confidence


class DailyInsights(CamelModel):
    """Model output for the insights flow; ``timestamp`` is overwritten after generation."""
    insights: List[Insight]
    summary: DaySummary
    trends: List[MetricTrend] = Field(default_factory=list)
    timestamp: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Suggestions
# ---------------------------------------------------------------------------

class RecentActivity(CamelModel):
    id: str
    type: str
    activity_type: str
    timestamp: str
    calories: Optional[float] = None
    insights: Optional[Dict] = None
    nutritional_info: Optional[Dict] = None


class UserProfile(CamelModel):
    """Profile keys stay snake_case on the wire, as stored by the profile service."""
    fitness_goals: Optional[List[str]] = Field(default=None, alias="fitness_goals")
    activity_level: Optional[str] = Field(default=None, alias="activity_level")
    dietary_preferences: Optional[List[str]] = Field(default=None, alias="dietary_preferences")
    weight_kg: Optional[float] = Field(default=None, alias="weight_kg")
    height_cm: Optional[float] = Field(default=None, alias="height_cm")


def default_profile() -> UserProfile:
    return UserProfile(fitness_goals=["general_fitness"], activity_level="moderately_active")


class TimeContext(CamelModel):
    time_of_day: TimeOfDay
    day_of_week: str
    season: Optional[str] = None


class PartialTimeContext(CamelModel):
    time_of_day: Optional[TimeOfDay] = None
    day_of_week: Optional[str] = None
    season: Optional[str] = None


class SuggestionInput(CamelModel):
    user_id: str
    recent_activities: List[RecentActivity] = Field(default_factory=list)
    user_profile: UserProfile = Field(default_factory=default_profile)
    time_context: TimeContext
    suggestion_type: SuggestionFocus = "general"


class SuggestionsRequest(CamelModel):
    type: Literal["full", "quick"] = "quick"
    suggestion_type: SuggestionFocus = "general"
    user_id: str = "anonymous"
    user_profile: Optional[UserProfile] = None
    recent_activities: List[RecentActivity] = Field(default_factory=list)
    include_recent_activities: bool = True
    time_context: Optional[PartialTimeContext] = None


class Suggestion(CamelModel):
    type: Literal["workout", "meal", "hydration", "rest", "supplement", "general"]
    title: str
    description: str
    reasoning: str
    priority: Priority
    estimated_benefit: str
    action_steps: List[str]
    time_to_implement: str
    tags: List[str] = Field(default_factory=list)


class PatternInsights(CamelModel):
    patterns: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    cautions: Optional[List[str]] = None


class GoalProgress(CamelModel):
    current_status: str
    next_milestone: str
    recommendation: str


class SuggestionSet(CamelModel):
    """Model output for the suggestion flows."""
    suggestions: List[Suggestion]
    insights: PatternInsights = Field(default_factory=PatternInsights)
    goal_progress: Optional[GoalProgress] = None
    confidence: Confidence
    timestamp: Optional[str] = None

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

"""
Coaching prompts - instruction text for the daily insights and suggestion flows.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..models import ProcessedHealthData, RecentActivity, SuggestionInput, UserProfile

NOT_SPECIFIED = "Not specified"


def _num(value: float):
    """500.0 -> 500, 12.5 -> 12.5"""
    return int(value) if float(value).is_integer() else value


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _joined(values: Optional[List[str]], empty: str = NOT_SPECIFIED) -> str:
    return ", ".join(values) if values else empty


def _activity_date(activity: RecentActivity) -> str:
    return activity.timestamp[:10]


def insights_prompt(data: ProcessedHealthData) -> str:
    m = data.metrics
    return f"""Analyze the following health data for {data.date} and provide personalized insights:

**Daily Metrics:**
- Calorie Deficit: {_num(m.calorie_deficit.value)} cal ({_num(m.calorie_deficit.percentage)}% of goal)
  - BMR: {_num(m.calorie_deficit.bmr)} cal
  - TDEE: {_num(m.calorie_deficit.tdee)} cal
  - Workout: {_num(m.calorie_deficit.workout_calories)} cal burned
  - Food: {_num(m.calorie_deficit.food_calories)} cal consumed

- Protein: {_num(m.protein.consumed)}g/{_num(m.protein.goal)}g ({_num(m.protein.percentage)}%)
  - Sources: {_joined(m.protein.sources, 'None logged')}

- Steps: {m.steps.count}/{m.steps.goal} ({_num(m.steps.percentage)}%)
  - Data source: {'Estimated' if m.steps.estimated else 'Tracked'}

- Exercise: {_num(m.exercise.duration)}/{_num(m.exercise.goal)} min ({_num(m.exercise.percentage)}%)
  - Workouts: {m.exercise.workout_count}
  - Types: {_joined(m.exercise.types, 'None')}

**Activities Summary:**
- Meals logged: {len(data.activities.meals)}
- Workouts completed: {len(data.activities.workouts)}
- Other activities: {len(data.activities.other)}

**Goal Achievement:**
- Meals logged (3+): {_yes_no(data.goals.meals_logged)}
- Workout completed: {_yes_no(data.goals.workout_completed)}
- Protein target: {_yes_no(data.goals.protein_target)}
- Calorie deficit: {_yes_no(data.goals.calorie_deficit)}

Please provide:
1. 3-5 specific, personalized insights based on the data
2. An overall health score (0-100) for the day
3. The biggest win and main area for improvement
4. A motivational message
5. Trend analysis for key metrics

Focus on being encouraging, actionable, and data-driven. Consider the time of day and what's realistic for the user to achieve."""


@dataclass
class ActivityPatterns:
    most_common_type: str = ""
    average_calories: float = 0.0
    activity_frequency: Dict[str, int] = field(default_factory=dict)
    recent_trends: List[str] = field(default_factory=list)


def analyze_activity_patterns(activities: List[RecentActivity]) -> ActivityPatterns:
    """
    Summarize recent activities (newest first) for the suggestion prompt.

    Ties for the most common activity type go to the type seen first.
    """
    patterns = ActivityPatterns()
    if not activities:
        return patterns

    counts: Dict[str, int] = {}
    calories = [a.calories for a in activities if a.calories]
    for activity in activities:
        counts[activity.activity_type] = counts.get(activity.activity_type, 0) + 1

    patterns.most_common_type = max(counts, key=counts.get)
    patterns.average_calories = sum(calories) / len(calories) if calories else 0.0
    patterns.activity_frequency = counts

    recent = activities[:7]
    if len(recent) > 3:
        patterns.recent_trends.append("Consistent activity logging")
    workouts = sum(1 for a in recent if a.type == "workout")
    meals = sum(1 for a in recent if a.type == "meal")
    if workouts > meals:
        patterns.recent_trends.append("More focused on fitness tracking")
    elif meals > workouts:
        patterns.recent_trends.append("More focused on nutrition tracking")

    return patterns


def _profile_lines(profile: UserProfile) -> List[str]:
    return [
        f"- Fitness Goals: {_joined(profile.fitness_goals)}",
        f"- Activity Level: {profile.activity_level or NOT_SPECIFIED}",
        f"- Dietary Preferences: {_joined(profile.dietary_preferences)}",
    ]


def suggestion_prompt(suggestion_input: SuggestionInput, patterns: ActivityPatterns) -> str:
    profile = suggestion_input.user_profile
    activities = suggestion_input.recent_activities
    time_context = suggestion_input.time_context

    frequency = ", ".join(f"{kind}: {count}" for kind, count in patterns.activity_frequency.items())
    activity_lines = "\n".join(
        f"- {a.activity_type} ({a.type}) - {_activity_date(a)} - "
        f"{_num(a.calories) if a.calories else 'N/A'} cal"
        for a in activities[:10]
    )
    context_lines = [
        f"- Time: {time_context.time_of_day} on {time_context.day_of_week}",
        f"- Focus Area: {suggestion_input.suggestion_type}",
    ]
    if time_context.season:
        context_lines.append(f"- Season: {time_context.season}")

    profile_block = "\n".join(_profile_lines(profile))
    context_block = "\n".join(context_lines)

    return f"""You are Fitally's AI health coach. Generate personalized suggestions for this user based on their profile, recent activities, and current context.

USER PROFILE:
{profile_block}
- Physical Stats: {_num(profile.height_cm) if profile.height_cm else 'N/A'}cm, {_num(profile.weight_kg) if profile.weight_kg else 'N/A'}kg

RECENT ACTIVITY PATTERNS:
- Most Common Activity: {patterns.most_common_type}
- Average Calories: {patterns.average_calories:.0f}
- Activity Frequency: {frequency}
- Recent Trends: {', '.join(patterns.recent_trends)}

RECENT ACTIVITIES (Last {len(activities)}):
{activity_lines}

CURRENT CONTEXT:
{context_block}

INSTRUCTIONS:
1. Provide 3-5 personalized suggestions that are:
   - Specific and actionable
   - Aligned with their goals and preferences
   - Appropriate for the current time and context
   - Based on their activity patterns and gaps

2. Include insights about their current patterns and potential improvements

3. If they have specific goals, provide progress assessment and next milestone

4. Consider their activity level and recent habits when suggesting intensity and frequency

5. Be encouraging and supportive while being realistic about expectations

Generate suggestions that will genuinely help them progress toward their health goals."""


def quick_suggestion_prompt(suggestion_input: SuggestionInput) -> str:
    profile = suggestion_input.user_profile
    time_context = suggestion_input.time_context
    profile_lines = [
        f"- Goals: {_joined(profile.fitness_goals)}",
        f"- Activity Level: {profile.activity_level or NOT_SPECIFIED}",
        f"- Dietary Preferences: {_joined(profile.dietary_preferences)}",
    ]
    activity_lines = [
        f"- {a.type}: {a.activity_type} ({_activity_date(a)})"
        for a in suggestion_input.recent_activities[:5]
    ]

    return "\n".join([
        "Based on the user's profile and recent activities, provide 3-5 quick, actionable suggestions for today.",
        "",
        "User Profile:",
        *profile_lines,
        "",
        "Recent Activities:",
        *activity_lines,
        "",
        f"Time Context: {time_context.time_of_day} on {time_context.day_of_week}",
        "",
        "Focus on practical, achievable suggestions that align with their goals and current "
        "activity patterns. Consider the time of day for appropriate recommendations.",
    ])

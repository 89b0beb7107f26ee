"""
Prompt Library - pure functions that render instruction text for the model.

Nothing here raises for missing optional data; absent fields are simply left
out of the rendered text.
"""

import re
from typing import List, Optional

from ..models import AnalysisContext

# Ordered by priority: the first group with a matching keyword wins
ACTIVITY_HINT_KEYWORDS = (
    ("cardio", ("run", "jog", "cardio")),
    ("strength", ("weight", "lift", "strength")),
    ("yoga", ("yoga", "stretch", "flexibility")),
    ("nutrition", ("meal", "food", "ate", "nutrition")),
)

# Short past-tense forms that would match inside unrelated words as substrings
ACTIVITY_HINT_WORDS = {
    "cardio": re.compile(r"\bran\b"),
}

ACTIVITY_PROMPTS = {
    "cardio": """For cardiovascular activities, focus on:
- Heart rate zones and intensity levels
- Duration and distance metrics
- Calorie burn estimation
- Recovery recommendations""",

    "strength": """For strength training activities, focus on:
- Muscle groups targeted
- Proper form and technique
- Weight/resistance levels
- Rep ranges and sets
- Progressive overload opportunities""",

    "yoga": """For yoga and flexibility activities, focus on:
- Pose alignment and modifications
- Breathing techniques
- Flexibility improvements
- Balance and stability
- Mental wellness benefits""",

    "nutrition": """For nutrition-related content, focus on:
- Macronutrient breakdown
- Calorie content estimation
- Meal timing and frequency
- Hydration recommendations
- Portion size assessment
- List each food item with its quantity, calories and macros""",
}

GENERIC_ACTIVITY_PROMPT = (
    "Analyze this health and fitness content comprehensively, identifying the most "
    "relevant aspects based on the content provided."
)

MODALITY_PROMPTS = {
    "image": """Analyze this health and fitness related image. Focus on:
- Activity type and exercise being performed
- Food items visible, with portion sizes and calorie estimates
- Form and technique assessment
- Equipment being used
- Safety considerations and recommendations
- Muscle groups being targeted
- Estimated intensity level
- Any improvements or modifications suggested""",

    "audio": """Analyze this health and fitness related audio transcript. Focus on:
- Activity descriptions mentioned
- Duration and intensity details
- Equipment or locations referenced
- Goals or challenges discussed
- Nutritional information if mentioned
- Progress updates or achievements""",

    "video": """Analyze this health and fitness related video. Focus on:
- Activity type and movement patterns
- Form and technique throughout the exercise
- Equipment usage and setup
- Range of motion and execution quality
- Safety considerations
- Progression or regression options
- Estimated calorie burn and intensity""",
}

ANALYSIS_CHECKLIST = """Please provide a comprehensive analysis that:
1. Identifies the specific activity type and category
2. Estimates duration, intensity, and calorie burn
3. Provides detailed insights relevant to the user's goals and fitness level
4. Offers personalized recommendations and improvements
5. Considers any health conditions or preferences mentioned
6. Assigns appropriate tags for categorization and tracking"""

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this audio accurately and describe any health or fitness related "
    "activities mentioned."
)

QUICK_CLOSING_INSTRUCTION = (
    "Provide a quick but comprehensive analysis focusing on the most relevant aspects "
    "for this type of activity."
)

NO_TEXT_PLACEHOLDER = "No additional text context provided."


def activity_hint(text: Optional[str]) -> Optional[str]:
    """
    Guess a coarse activity category from free text.

    Used only to pick a prompt template; the model's activityType stays authoritative.

    >>> activity_hint("I went for a run this morning")
    'cardio'
    >>> activity_hint("ate a salad")
    'nutrition'
    """
    if not text:
        return None
    lowered = text.lower()
    for hint, keywords in ACTIVITY_HINT_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return hint
        word_pattern = ACTIVITY_HINT_WORDS.get(hint)
        if word_pattern is not None and word_pattern.search(lowered):
            return hint
    return None


def activity_instructions(hint: Optional[str] = None) -> str:
    """Hint-specific focus block, or the generic one when no hint applies."""
    if hint and hint.lower() in ACTIVITY_PROMPTS:
        return ACTIVITY_PROMPTS[hint.lower()]
    return GENERIC_ACTIVITY_PROMPT


def _user_context_appendix(context: Optional[AnalysisContext]) -> str:
    if context is None or context.user_preferences is None:
        return ""
    prefs = context.user_preferences
    lines: List[str] = []
    if prefs.fitness_level:
        lines.append(f"- Fitness Level: {prefs.fitness_level}")
    if context.user_goals:
        lines.append(f"- Goals: {', '.join(context.user_goals)}")
    if prefs.preferred_activities:
        lines.append(f"- Preferences: {', '.join(prefs.preferred_activities)}")

    appendix = "\n\nUser Context:"
    if lines:
        appendix += "\n" + "\n".join(lines)
    appendix += (
        "\n\nPlease tailor your analysis to the user's context and provide "
        "personalized recommendations."
    )
    return appendix


def modality_instructions(modality: str, context: Optional[AnalysisContext] = None) -> str:
    """
    Instruction block for a media modality.

    Unknown modalities get the generic block. When the context carries user
    preferences, a short personalisation appendix is added.
    """
    prompt = MODALITY_PROMPTS.get(modality, GENERIC_ACTIVITY_PROMPT)
    return prompt + _user_context_appendix(context)


def contextual_instructions(context: AnalysisContext) -> str:
    """Render the user context followed by the fixed analysis checklist."""
    lines = [
        "Analyze this health activity with the following user context:",
        f"- User ID: {context.user_id}",
        f"- Timestamp: {context.timestamp}",
    ]

    if context.user_goals:
        lines.append(f"- User Goals: {', '.join(context.user_goals)}")

    prefs = context.user_preferences
    if prefs is not None:
        if prefs.fitness_level:
            lines.append(f"- Fitness Level: {prefs.fitness_level}")
        if prefs.preferred_activities:
            lines.append(f"- Preferred Activities: {', '.join(prefs.preferred_activities)}")
        if prefs.health_conditions:
            lines.append(f"- Health Conditions: {', '.join(prefs.health_conditions)}")

    return "\n".join(lines) + "\n\n" + ANALYSIS_CHECKLIST


def quick_prompt(text: str, hint: Optional[str], context: AnalysisContext) -> str:
    """Single concatenated prompt used by the quick text flow."""
    return "\n\n".join([
        text,
        activity_instructions(hint),
        contextual_instructions(context),
        QUICK_CLOSING_INSTRUCTION,
    ])


def audio_analysis_prompt(transcript: str, text_input: Optional[str],
                          context: AnalysisContext) -> str:
    """Text-only prompt for the second stage of the audio flow."""
    sections = [f'Transcribed Audio Content: "{transcript}"']
    if text_input and text_input.strip():
        sections.append(f"Additional Context: {text_input}")
    sections.append(modality_instructions("audio", context))
    sections.append(contextual_instructions(context))
    return "\n\n".join(sections)

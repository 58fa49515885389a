from __future__ import annotations

# Phrases that divert a chat message to crisis resources instead of the relay.
# Values are carried over unchanged; edit only with clinical sign-off.
CRISIS_PHRASES: tuple[str, ...] = (
    "kill myself",
    "end my life",
    "suicide",
    "suicidal",
    "want to die",
    "hurt myself",
    "self harm",
    "overdose",
    "can't go on",
    "no point living",
    "better off dead",
    "end it all",
    "harm myself",
)

CRISIS_SUPPORT_MESSAGE = (
    "I'm concerned about what you've shared. "
    "Please use the resources I'm providing to get immediate support."
)

CRISIS_RESOURCES: list[dict[str, str]] = [
    {
        "name": "Emergency services",
        "contact": "Call your local emergency number (911 in the US)",
        "description": "If you are in immediate danger, call now.",
    },
    {
        "name": "988 Suicide & Crisis Lifeline",
        "contact": "Call or text 988",
        "description": "Free, confidential support 24/7.",
    },
    {
        "name": "Crisis Text Line",
        "contact": "Text HOME to 741741",
        "description": "Text with a trained crisis counselor.",
    },
]


def _frequency_options(*labels: str) -> list[dict[str, object]]:
    return [{"text": label, "value": value} for value, label in enumerate(labels)]


ASSESSMENT_QUESTIONS: list[dict[str, object]] = [
    {
        "id": 1,
        "text": "Over the past two weeks, how often have you felt down, depressed, or hopeless?",
        "options": _frequency_options(
            "Not at all", "Several days", "More than half the days", "Nearly every day"
        ),
    },
    {
        "id": 2,
        "text": "How often have you felt nervous, anxious, or on edge?",
        "options": _frequency_options(
            "Not at all", "Several days", "More than half the days", "Nearly every day"
        ),
    },
    {
        "id": 3,
        "text": "How would you rate your overall stress level recently?",
        "options": _frequency_options("Very low", "Low", "Moderate", "High", "Very high"),
    },
    {
        "id": 4,
        "text": "How well have you been sleeping?",
        "options": _frequency_options(
            "Very well", "Fairly well", "Not very well", "Not well at all"
        ),
    },
    {
        "id": 5,
        "text": "How often do you feel overwhelmed by daily responsibilities?",
        "options": _frequency_options("Never", "Rarely", "Sometimes", "Often", "Always"),
    },
    {
        "id": 6,
        "text": "How satisfied are you with your social connections and relationships?",
        "options": _frequency_options("Very satisfied", "Satisfied", "Neutral", "Dissatisfied"),
    },
    {
        "id": 7,
        "text": "How often do you engage in activities you enjoy?",
        "options": _frequency_options(
            "Daily", "Several times a week", "Once a week", "Rarely", "Never"
        ),
    },
    {
        "id": 8,
        "text": "How hopeful do you feel about the future?",
        "options": _frequency_options(
            "Very hopeful",
            "Somewhat hopeful",
            "Neutral",
            "Not very hopeful",
            "Not hopeful at all",
        ),
    },
]

# Detailed bands shown with the questionnaire result. ``max_score`` is inclusive;
# ``None`` marks the open-ended top band.
ASSESSMENT_BANDS: list[dict[str, object]] = [
    {
        "max_score": 7,
        "category": "Generally Well",
        "description": (
            "You seem to be managing well overall. Keep practicing self-care and "
            "maintain the positive habits that work for you."
        ),
        "suggestions": [
            "Continue your current self-care practices",
            "Maintain regular sleep and exercise routines",
            "Stay connected with supportive people",
        ],
    },
    {
        "max_score": 15,
        "category": "Mild Distress",
        "description": (
            "You may be experiencing some mild stress or emotional challenges. This is "
            "normal, and some self-care strategies might be helpful."
        ),
        "suggestions": [
            "Try stress-reduction techniques like deep breathing",
            "Consider guided meditation or mindfulness practices",
            "Reach out to trusted friends or family for support",
        ],
    },
    {
        "max_score": 23,
        "category": "Moderate Distress",
        "description": (
            "You might be going through a challenging time. Consider reaching out to "
            "trusted people in your life or exploring professional support options."
        ),
        "suggestions": [
            "Consider speaking with a counselor or therapist",
            "Practice regular stress-reduction techniques",
            "Maintain check-ins with your support network",
        ],
    },
    {
        "max_score": None,
        "category": "High Distress",
        "description": (
            "You may be experiencing significant distress. We strongly encourage you to "
            "reach out for professional support. Remember, seeking help is a sign of strength."
        ),
        "suggestions": [
            "Strongly consider contacting a mental health professional",
            "Reach out to crisis support resources if needed",
            "Connect with trusted friends, family, or support groups",
        ],
    },
]

# Coarse bands returned by the assessment API. Thresholds must match ASSESSMENT_BANDS.
RESOURCE_BANDS: list[dict[str, object]] = [
    {
        "max_score": 7,
        "category": "well",
        "suggestions": [
            "Continue daily self-care practices",
            "Maintain regular sleep schedule",
            "Keep connecting with supportive people",
        ],
    },
    {
        "max_score": 15,
        "category": "mild",
        "suggestions": [
            "Practice deep breathing exercises",
            "Consider guided meditation",
            "Reach out to trusted friends or family",
        ],
    },
    {
        "max_score": 23,
        "category": "moderate",
        "suggestions": [
            "Consider speaking with a counselor",
            "Practice stress-reduction techniques",
            "Maintain regular check-ins with support network",
        ],
    },
    {
        "max_score": None,
        "category": "high",
        "suggestions": [
            "Strongly consider professional support",
            "Contact mental health resources",
            "Reach out to crisis support if needed",
        ],
    },
]

"""Prompt text used by the diet workflow."""

from __future__ import annotations

SYSTEM_PROMPT = (
    "You are a helpful AI fitness assistant. Your goal is to provide a user with a simple "
    "diet plan based on user's preferences."
)

FOLLOWUP_QUESTION = (
    "To create your diet plan, I need additional parameters such as your diet preference "
    "and fitness level."
)

GENERATION_FAILED_REPLY = (
    "Sorry, I could not generate a diet plan right now. Please try again in a moment."
)


def extraction_prompt(message: str) -> str:
    return (
        "Extract the 'diet type' and 'fitness level' from the following message. "
        "Return a stringified JSON object as a plain text without any formatting in a "
        'following format: { "dietType": <diet type>, "fitnessLevel": <fitness level> }. '
        "If no data specified for a specific parameter, set its value to null. "
        f"Message: {message}"
    )


def generation_prompt(diet_type: str | None, fitness_level: str | None) -> str:
    return (
        f"Please create a detailed diet plan of the {diet_type} diet type for a user of "
        f"{fitness_level} fitness level"
    )


def review_prompt(diet_type: str | None, fitness_level: str | None) -> str:
    return (
        "The user didn't provide enough data to generate a diet plan, the current preferences "
        f'are: dietType = "{diet_type}", fitnessLevel="{fitness_level}". '
        "Should I generate a random diet plan? If not, I will ask the user for the preferences "
        "one more time. (Y/N/Yes/No)"
    )

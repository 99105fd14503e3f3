"""Menu analysis prompts for OpenAI."""

from infrastructure.ai.prompts.menu_analysis import (
    DISH_DETAILS_SYSTEM_PROMPT,
    MENU_OCR_SYSTEM_PROMPT,
    MENU_OCR_USER_PROMPT,
    dish_details_user_prompt,
)

__all__ = [
    "MENU_OCR_SYSTEM_PROMPT",
    "MENU_OCR_USER_PROMPT",
    "DISH_DETAILS_SYSTEM_PROMPT",
    "dish_details_user_prompt",
]

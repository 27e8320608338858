import re
from typing import Optional

SCORE_PATTERNS = (
    re.compile(r'score\s*(?:of|is)?\s*[:=]?\s*\**\s*(\d{1,3})', re.IGNORECASE),
    re.compile(r'(\d{1,3})\s*(?:/|out of)\s*100', re.IGNORECASE),
)

EVALUATOR_PROMPT = (
    "You are a supportive coach teaching the grey rock technique: calm, brief, "
    "emotionally neutral replies that give a manipulator nothing to react to."
)


def build_evaluation_prompt(scenario, response: str) -> str:
    """Prompt asking the model to grade *response* against the grey rock rubric."""
    return (
        "Evaluate this grey rock response to a manipulative message.\n\n"
        f"Manipulative message: \"{scenario.provocative_message}\"\n"
        f"User's response: \"{response}\"\n\n"
        "Rate the response from 1-100 based on grey rock technique:\n"
        "- Emotional neutrality (not reactive)\n"
        "- Brevity (short, not over-explaining)\n"
        "- Non-engagement (doesn't take bait)\n"
        "- No defensiveness\n"
        "- Boring/uninteresting to the manipulator\n\n"
        f"Good examples: {', '.join(scenario.good_responses or [])}\n"
        f"Bad examples: {', '.join(scenario.bad_responses or [])}\n\n"
        "Start your answer with a line of the form 'Score: <number>' and then give "
        "specific feedback on how to improve."
    )


def parse_score(text: str) -> Optional[int]:
    """Pull the 0-100 score out of the model's reply; None if it gave none."""
    for pattern in SCORE_PATTERNS:
        match = pattern.search(text or '')
        if match:
            value = int(match.group(1))
            if 0 <= value <= 100:
                return value
    return None

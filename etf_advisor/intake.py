"""
Intake state machine: slot-filling one profile field per chat message.

PURPOSE:
- Decide which field is pending, run that field's validator on the latest
  message, and answer with either the next question or a re-prompt.
- Hand the completed profile to a caller-supplied callback so the rendered
  recommendation becomes the final message of the conversation.

CONTEXT:
- Called once per inbound message by the Agent, the CLI and the Streamlit UI.
- Pure apart from on_complete: the same (profile, text) always yields the
  same (profile, prompt, is_final).

CREDITS:
- Original work — no external code reuse.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from etf_advisor.profile import PendingField, UserProfile
from etf_advisor.validators import (
    parse_amount,
    parse_goal,
    parse_horizon,
    parse_investment_type,
    parse_risk_tolerance,
    parse_yes_no,
)

WELCOME = (
    "Welcome to the Easy Equities Advisor Bot! I'm here to help you create a "
    "personalized investment portfolio.\n\nWhat's your investment goal (in Rands)?"
)
ALREADY_COMPLETED = (
    "I've already provided a portfolio recommendation. If you'd like a new one, "
    "please restart the conversation to begin again."
)
PROFILE_COMPLETE = "Thanks, I have everything I need to build your portfolio."


@dataclass(frozen=True)
class FieldRule:
    """How one pending field is asked for, parsed and re-asked."""
    parse: Callable[[Any], Any]
    prompt: str
    reprompt: str


TRANSITIONS: Dict[PendingField, FieldRule] = {
    PendingField.INVESTMENT_GOAL: FieldRule(
        parse_goal,
        "What's your investment goal (in Rands)?",
        "Please enter a valid investment amount (e.g., 10000)",
    ),
    PendingField.TIME_HORIZON_YEARS: FieldRule(
        parse_horizon,
        "How long do you plan to invest for? Please specify the number of years "
        "(e.g., 5 years, 10 years, etc.)",
        "Please enter a valid time horizon in years (between 1 and 50 years)",
    ),
    PendingField.RISK_TOLERANCE: FieldRule(
        parse_risk_tolerance,
        "What's your risk tolerance? (Low, Medium, or High)",
        "Please specify your risk tolerance as Low, Medium, or High",
    ),
    PendingField.INCOME_NEEDS: FieldRule(
        parse_yes_no,
        "Do you need regular income from this investment? (Yes/No)",
        "Please answer Yes or No regarding your income needs",
    ),
    PendingField.INVESTMENT_AMOUNT: FieldRule(
        parse_amount,
        "How much are you planning to invest? (in Rands)",
        "Please enter a valid investment amount (e.g., 10000)",
    ),
    PendingField.INVESTMENT_TYPE: FieldRule(
        parse_investment_type,
        "Is this a once-off lump sum investment or a recurring monthly investment? "
        "(Type 'once-off' or 'monthly')",
        "Please specify 'once-off' for a lump sum or 'monthly' for a recurring investment.",
    ),
    PendingField.MONTHLY_AMOUNT: FieldRule(
        parse_amount,
        "What is the monthly amount you plan to invest? (in Rands)",
        "Please enter a valid monthly investment amount (e.g., 1000)",
    ),
}


def opening_prompt() -> str:
    return WELCOME


def prompt_for(profile: UserProfile) -> str:
    """Question for the profile's pending field (or the already-completed notice)."""
    pending = profile.pending_field()
    return TRANSITIONS[pending].prompt if pending else ALREADY_COMPLETED


def advance(
    profile: UserProfile,
    text: str,
    on_complete: Optional[Callable[[UserProfile], str]] = None,
) -> Tuple[UserProfile, str, bool]:
    """
    Apply one user message to the profile.

    parameters:
    - profile: UserProfile – answers collected so far.
    - text: str – the raw chat message.
    - on_complete: callable (optional) – invoked synchronously with the completed
      profile; its return value (the rendered advice) becomes the final prompt.

    returns:
    - (profile, prompt, is_final): tuple
      - invalid answer: the same profile object, a re-prompt, False
      - valid answer, more to ask: a new profile, the next question, False
      - valid answer completing the profile: a new profile, the advice
        (or PROFILE_COMPLETE without a callback), True
      - any message after completion: the same profile, ALREADY_COMPLETED, True

    notes:
    - Exceptions from on_complete propagate; the caller decides whether to keep
      the completed profile.
    """
    pending = profile.pending_field()
    if pending is None:
        return profile, ALREADY_COMPLETED, True

    rule = TRANSITIONS[pending]
    value = rule.parse(text)
    if value is None:
        return profile, rule.reprompt, False

    updated = profile.with_field(pending, value)
    nxt = updated.pending_field()
    if nxt is not None:
        return updated, TRANSITIONS[nxt].prompt, False

    prompt = on_complete(updated) if on_complete else PROFILE_COMPLETE
    return updated, prompt, True

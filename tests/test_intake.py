import pytest

from etf_advisor.intake import (
    ALREADY_COMPLETED,
    PROFILE_COMPLETE,
    TRANSITIONS,
    WELCOME,
    advance,
    opening_prompt,
    prompt_for,
)
from etf_advisor.profile import PendingField, UserProfile

ONCE_OFF_ANSWERS = ["10000", "5 years", "medium", "no", "10000", "once-off"]


def _run(answers, on_complete=None):
    profile, turns = UserProfile(), []
    for text in answers:
        profile, prompt, final = advance(profile, text, on_complete=on_complete)
        turns.append((prompt, final))
    return profile, turns


def test_opening_prompt_is_welcome():
    assert opening_prompt() == WELCOME
    assert prompt_for(UserProfile()) == TRANSITIONS[PendingField.INVESTMENT_GOAL].prompt


def test_once_off_conversation_finishes_on_sixth_answer():
    profile, turns = _run(ONCE_OFF_ANSWERS, on_complete=lambda p: "ADVICE")
    assert [final for _, final in turns] == [False] * 5 + [True]
    assert turns[-1][0] == "ADVICE"
    assert profile.is_complete()
    assert profile.time_horizon_years == 5 and profile.income_needs is False


def test_each_valid_answer_asks_next_question():
    _, turns = _run(ONCE_OFF_ANSWERS[:3])
    assert turns[0][0] == TRANSITIONS[PendingField.TIME_HORIZON_YEARS].prompt
    assert turns[1][0] == TRANSITIONS[PendingField.RISK_TOLERANCE].prompt
    assert turns[2][0] == TRANSITIONS[PendingField.INCOME_NEEDS].prompt


def test_monthly_branch_asks_for_monthly_amount():
    profile, turns = _run(ONCE_OFF_ANSWERS[:5] + ["monthly", "R1,000"])
    assert turns[5] == (TRANSITIONS[PendingField.MONTHLY_AMOUNT].prompt, False)
    assert turns[6] == (PROFILE_COMPLETE, True)
    assert profile.monthly_amount == 1000.0


@pytest.mark.parametrize("answers,bad", [
    ([], "lots"),
    (["10000"], "0 years"),
    (["10000", "5"], "extreme"),
    (["10000", "5", "low"], "perhaps"),
    (["10000", "5", "low", "yes"], "-"),
    (["10000", "5", "low", "yes", "5000"], "weekly"),
])
def test_invalid_answer_reprompts_and_keeps_profile(answers, bad):
    profile, _ = _run(answers)
    pending = profile.pending_field()
    same, prompt, final = advance(profile, bad)
    assert same is profile
    assert prompt == TRANSITIONS[pending].reprompt
    assert final is False


def test_advance_is_idempotent():
    profile, _ = _run(ONCE_OFF_ANSWERS[:2])
    assert advance(profile, "high") == advance(profile, "high")
    assert advance(profile, "nope") == advance(profile, "nope")


def test_messages_after_completion_get_already_completed():
    calls = []
    profile, _ = _run(ONCE_OFF_ANSWERS, on_complete=lambda p: calls.append(p) or "ADVICE")
    same, prompt, final = advance(profile, "hello again", on_complete=lambda p: calls.append(p) or "X")
    assert same is profile
    assert (prompt, final) == (ALREADY_COMPLETED, True)
    assert len(calls) == 1
    assert prompt_for(profile) == ALREADY_COMPLETED


def test_on_complete_errors_propagate():
    profile, _ = _run(ONCE_OFF_ANSWERS[:5])

    def boom(p):
        raise RuntimeError("engine down")

    with pytest.raises(RuntimeError):
        advance(profile, "once-off", on_complete=boom)


def test_oversized_horizon_answer_reprompts():
    profile = UserProfile(investment_goal="10000")
    same, prompt, final = advance(profile, "9" * 5000)
    assert same is profile
    assert prompt == TRANSITIONS[PendingField.TIME_HORIZON_YEARS].reprompt
    assert final is False

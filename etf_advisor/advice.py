# PURPOSE: Render an allocation into the chat message that ends the intake.
# CONTEXT: Called by the Agent (and the local UIs) once the profile is complete;
#          the returned text is the terminal prompt of the conversation.
# CREDITS: Original work — no external code reuse.

from __future__ import annotations
from typing import List

from etf_advisor.model_interface.types import AllocationResult
from etf_advisor.profile import UserProfile
from etf_advisor.utils.rounding import round_weights

DISCLAIMER = (
    "Disclaimer: This is a simplified model and should not be considered as professional "
    "financial advice. Always do your own research and consider consulting with a qualified "
    "financial advisor before making investment decisions."
)
GENERATION_FAILED = "I apologize, but I couldn't generate a portfolio at this time. Please try again."


def _profile_block(profile: UserProfile, amount: float) -> List[str]:
    lines = [
        "Based on your profile:",
        "",
        f"Investment Goal: {profile.investment_goal}",
        f"Time Horizon: {profile.time_horizon_years} years",
        f"Risk Tolerance: {profile.risk_tolerance}",
        f"Income Needs: {'yes' if profile.income_needs else 'no'}",
    ]
    if profile.investment_type == "monthly":
        lines += ["Investment Type: Monthly", f"Monthly Amount: R{amount:.2f}"]
    else:
        lines += ["Investment Type: Once-off", f"Investment Amount: R{amount:.2f}"]
    return lines


def _table(result: AllocationResult, amount: float) -> List[str]:
    portfolio = result["portfolio"]
    shown = round_weights({name: h["weight"] for name, h in portfolio.items()})
    lines = [
        "| ETF | Allocation | Amount (R) | Description |",
        "| --- | ---------- | ---------- | ----------- |",
    ]
    for name, h in portfolio.items():
        lines.append(f"| {name} | {shown[name] * 100:.1f}% | R{amount * h['weight']:.2f} | {h['description']} |")
    return lines


def _strategy_sections(profile: UserProfile) -> List[str]:
    lines: List[str] = []
    if profile.investment_type == "monthly":
        lines += [
            "Monthly Investment Strategy:",
            "",
            "• Consider setting up a monthly debit order for consistent investing (rand-cost averaging)",
            "• Review your portfolio allocation every 6-12 months",
            "• Reinvest dividends to maximize compounding",
            "",
        ]
    if profile.time_horizon_years and profile.time_horizon_years > 10:
        lines += [
            "Long-term Investment Strategy:",
            "",
            "• Consider automatic reinvestment of dividends",
            "• Plan for periodic rebalancing (every 6-12 months)",
            "• Focus on cost-averaging through regular contributions",
            "",
        ]
    if profile.income_needs:
        lines += [
            "Income Strategy:",
            "",
            "• Consider setting up a quarterly dividend withdrawal plan",
            "• Monitor dividend payment schedules of your ETFs",
            "• Maintain a cash buffer for consistent income",
            "",
        ]
    return lines


def _analysis_block(result: AllocationResult) -> List[str]:
    analysis = result["market_analysis"]
    lines = ["Market Outlook:", "", analysis["description"], ""]
    if analysis["factors"]:
        lines += [f"• {f['factor']}: {f['impact']}" for f in analysis["factors"]]
        lines.append("")
    lines += ["Why this mix:", ""]
    lines += [f"• {r}" for r in analysis["rationale"]]
    lines.append("")
    return lines


def render_advice(profile: UserProfile, result: AllocationResult, amount: float) -> str:
    """
    Build the full recommendation message.

    parameters:
    - profile: UserProfile – the completed intake answers.
    - result: AllocationResult – engine output for this profile.
    - amount: float – lump sum or monthly figure the table is priced against.

    returns:
    - str – plain text with a Markdown table; percentages are display-rounded to
      add up to 100% while the Rand amounts use the exact weights.
    """
    lines = _profile_block(profile, amount)
    lines += ["", "Here's your personalized Easy Equities portfolio:", "", "Model Portfolio (Table):", ""]
    lines += _table(result, amount)
    lines.append("")
    lines += _strategy_sections(profile)
    lines += _analysis_block(result)
    lines += [
        "Implementation Steps:",
        "",
        "1. Log in to your Easy Equities account",
        "2. Navigate to the 'Buy' section",
        "3. Search for each ETF listed above",
        "4. Enter the Rand amount for each ETF as calculated above",
        "5. Review and confirm your orders",
        "",
        "Remember to regularly review and rebalance your portfolio. Consider setting up a "
        "monthly debit order to consistently invest over time.",
        "",
        DISCLAIMER,
    ]
    return "\n".join(lines)

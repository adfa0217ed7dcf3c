#!/usr/bin/env python3
# PURPOSE: Command-line chat with the ETF advisor bot.
# CONTEXT: Runs the same Agent as the Lambda, statelessly: the profile returned by
#          each turn is sent back with the next message, so no DynamoDB is needed.
# CREDITS: Original work — no reused or adapted external code.

import json, sys
from etf_advisor.agent import Agent
from etf_advisor.logging_setup import configure_logging

configure_logging()
agent = Agent()

print("ETF Advisor CLI: answer each question and press Enter. Ctrl+C to exit.")
print("Type /json to dump the last recommendation, /restart to start over.\n")

out = agent.handle({"action": "start"})
print(out["prompt"])
profile = out["profile"]
last = None

while True:
    try:
        text = input("> ")
        if text.strip() == "/restart":
            out = agent.handle({"action": "start"})
            profile, last = out["profile"], None
            print(out["prompt"])
            continue
        if text.strip() == "/json":
            print(json.dumps(last, indent=2) if last else "No recommendation yet.")
            continue

        out = agent.handle({"message": {"text": text}, "profile": profile, "context": {"demo_seed": 123}})
        profile = out.get("profile", profile)
        last = out.get("recommendation", last)
        print(out["messages"][0]["content"])

    except (EOFError, KeyboardInterrupt):
        print("\nBye!")
        sys.exit(0)

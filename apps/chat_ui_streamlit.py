# PURPOSE: Streamlit chat front end for the ETF advisor bot: asks the intake
#          questions one at a time, then shows the recommendation with charts.
# CONTEXT: Local demo; talks to the Agent in-process and keeps the profile in
#          st.session_state instead of DynamoDB.
# CREDITS: Original work — no external code reuse.

import json
import plotly.express as px
import streamlit as st
from etf_advisor.agent import Agent
from etf_advisor.agent_io import make_user_message

st.set_page_config(page_title="Easy Equities Advisor Bot", layout="centered")

st.title("Easy Equities Advisor Bot")
st.caption("Model ETF portfolios for South African investors – not financial advice.")

if st.button("Restart conversation") or "history" not in st.session_state:
    first = Agent().handle({"action": "start"})
    st.session_state.history = list(first["messages"])
    st.session_state.profile = first["profile"]
    st.session_state.done = False

text = st.chat_input("Type your answer…", disabled=st.session_state.done)
if text:
    out = Agent().handle({"message": {"text": text}, "profile": st.session_state.profile,
                          "context": {"demo_seed": 123}})
    st.session_state.history.append(make_user_message(text))
    st.session_state.history.append({**out["messages"][0], "recommendation": out.get("recommendation")})
    st.session_state.profile = out.get("profile", st.session_state.profile)
    st.session_state.done = bool(out.get("is_final"))

for msg in st.session_state.history:
    rec = msg.get("recommendation")
    with st.chat_message(msg["role"]):
        st.markdown(msg["content"])
        if not rec:
            continue

        portfolio = rec["portfolio"]
        st.subheader("Allocation")
        st.plotly_chart(px.pie(
            names=list(portfolio),
            values=[h["weight"] for h in portfolio.values()],
            title="Model Portfolio",
        ), use_container_width=True)

        st.subheader("Projected growth")
        growth = rec["growth_projection"]
        st.plotly_chart(px.line(
            x=[p["year"] for p in growth],
            y=[p["value"] for p in growth],
            labels={"x": "Year", "y": "Value (R)"},
        ), use_container_width=True)

        if not rec["market"]["live"]:
            st.warning("Live market data was unavailable; the allocation used default market conditions.")

        with st.expander("Raw JSON"):
            st.code(json.dumps(rec, indent=2))

"""
Agent core logic: routes a chat or API payload to the intake conversation or
straight to the allocation pipeline, and records a lightweight trace.

PURPOSE: High-level controller shared by the Lambda handler, the CLI and the
         Streamlit UI.
CONTEXT: Intake state arrives either inline (payload.profile, stateless clients)
         or from the DynamoDB session store (payload.session_id).
CREDITS: Original work — no external code reuse.
"""

import traceback
from typing import Any, Dict, Optional

import structlog
from jsonschema import ValidationError

from etf_advisor import state_manager as sm
from etf_advisor.advice import GENERATION_FAILED, render_advice
from etf_advisor.agent_io import error_to_string, make_ok_message
from etf_advisor.intake import advance, opening_prompt
from etf_advisor.pipeline import run_pipeline
from etf_advisor.profile import UserProfile

log = structlog.get_logger(component="agent")

UNEXPECTED_ERROR = "Sorry, something went wrong on our side. Please try again."


class Agent:
    """High-level controller for the advisor bot."""

    def __init__(self):
        # Planning steps of the current request, echoed back for debugging.
        self.trace = []

    def handle(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Main entry point.

        parameters:
        - payload: dict – one of
          - {"action": "start", "session_id"?}: reset and send the opening question
          - {"message": {"text": ...}, "profile"? | "session_id"?}: one intake turn
          - {"user_profile": {...}, "amount": ..., "context"?}: direct allocation

        returns:
        - dict – always {"status", "messages", "trace", ...}; intake turns add
          prompt/is_final/profile, completed intakes and allocations add
          'recommendation'.

        notes:
        - Internal exception text never reaches the client; it is logged instead.
        """
        payload = payload if isinstance(payload, dict) else {}
        self.trace = []
        try:
            plan = self._plan(payload)
            self.trace.append(plan)
            if plan["next"] == "intake":
                return self._intake(payload)
            if plan["next"] == "allocate":
                return self._allocate(payload)
            return self._start(payload)
        except Exception as e:
            log.error("agent.error", error=str(e), traceback=traceback.format_exc(limit=2))
            return {
                "status": "error",
                "messages": [make_ok_message(UNEXPECTED_ERROR)],
                "trace": self.trace,
            }

    def _plan(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rule-based planner.

        rules:
        - action == "start" (or no recognisable request) starts a new conversation.
        - a 'message' continues the intake.
        - a 'user_profile' skips the conversation and allocates directly.
        """
        if payload.get("action") == "start":
            return {"next": "start"}
        if "message" in payload:
            return {"next": "intake"}
        if "user_profile" in payload:
            return {"next": "allocate"}
        return {"next": "start"}

    # -------------------- routes -------------------- #

    def _start(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        session_id = payload.get("session_id")
        if session_id:
            try:
                sm.clear_session(session_id)
            except Exception as e:
                log.warning("session.clear_failed", session_id=session_id, error=str(e))
        prompt = opening_prompt()
        return self._turn(session_id, prompt, False, UserProfile())

    def _intake(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        session_id = payload.get("session_id")
        message = payload.get("message")
        text = message.get("text", "") if isinstance(message, dict) else message

        if "profile" in payload:
            profile = UserProfile.from_dict(payload.get("profile"))
        else:
            profile = self._load(session_id) or UserProfile()

        recommendation: Dict[str, Any] = {}

        def on_complete(completed: UserProfile) -> str:
            recommendation.update(self._recommend(completed, payload.get("context")))
            return render_advice(completed, recommendation, completed.allocation_amount())

        try:
            updated, prompt, is_final = advance(profile, text, on_complete=on_complete)
        except Exception as e:
            # The completing answer is not stored, so sending it again retries.
            log.error("intake.generation_failed", session_id=session_id, error=str(e),
                      traceback=traceback.format_exc(limit=2))
            out = self._turn(session_id, GENERATION_FAILED, False, profile)
            out["status"] = "error"
            return out

        if session_id and updated is not profile:
            self._save(session_id, updated)

        out = self._turn(session_id, prompt, is_final, updated)
        if recommendation:
            out["recommendation"] = recommendation
        return out

    def _allocate(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        request = {k: payload[k] for k in ("user_profile", "amount", "initial_amount", "context") if k in payload}
        try:
            result = run_pipeline(request)
        except ValidationError as e:
            return {
                "status": "error",
                "messages": [make_ok_message(f"Invalid request: {error_to_string(e)}")],
                "trace": self.trace,
            }
        except ValueError as e:
            log.error("allocate.rejected", error=str(e))
            return {"status": "error", "messages": [make_ok_message(GENERATION_FAILED)], "trace": self.trace}

        n = len(result["portfolio"])
        return {
            "status": "ok",
            "messages": [make_ok_message(f"Generated a {n}-ETF portfolio.")],
            "recommendation": result,
            "trace": self.trace,
        }

    # -------------------- helpers -------------------- #

    def _recommend(self, profile: UserProfile, context: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        request: Dict[str, Any] = {
            "user_profile": profile.to_engine_profile(),
            "amount": profile.allocation_amount(),
            "initial_amount": profile.investment_amount,
        }
        if context:
            request["context"] = context
        return run_pipeline(request)

    def _turn(self, session_id: Optional[str], prompt: str, is_final: bool, profile: UserProfile) -> Dict[str, Any]:
        out = {
            "status": "ok",
            "messages": [make_ok_message(prompt)],
            "prompt": prompt,
            "is_final": is_final,
            "profile": profile.to_dict(),
            "trace": self.trace,
        }
        if session_id:
            out["session_id"] = session_id
        return out

    def _load(self, session_id: Optional[str]) -> Optional[UserProfile]:
        if not session_id:
            return None
        try:
            return sm.load_profile(session_id)
        except Exception as e:
            # A lost session restarts the intake rather than failing the turn.
            log.warning("session.load_failed", session_id=session_id, error=str(e))
            return None

    def _save(self, session_id: str, profile: UserProfile) -> None:
        try:
            sm.save_profile(session_id, profile)
        except Exception as e:
            log.warning("session.save_failed", session_id=session_id, error=str(e))

"""
Session state, its transition function and the controller driving it.
"""

from mailer_gen.session.controller import SessionController, resolve_submission
from mailer_gen.session.state import SessionState, reduce_session

__all__ = [
    "SessionController",
    "SessionState",
    "reduce_session",
    "resolve_submission",
]

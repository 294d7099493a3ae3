"""
Session control: one user submission to one streamed reply.

- SessionController: submit() orchestrates transport -> stream pipeline
  -> conversation reducer, one request at a time
- SessionStatus: IDLE / BUSY
"""

from blackv.session.controller import SessionController, SessionStatus

__all__ = ["SessionController", "SessionStatus"]

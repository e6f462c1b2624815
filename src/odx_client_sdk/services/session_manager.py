from __future__ import annotations

import logging

from ..clients.base import RemoteRecordClient, keywords, unwrap_result
from ..exceptions import NoActiveConfigError, NoOpenSessionError
from ..field_values import as_int, as_text, extract_created_id, field
from ..models import RequestContext
from ..models_pos import (
    ACTION_SESSION_CLOSING_CONTROL,
    ACTION_SESSION_OPEN,
    ACTIVE_SESSION_STATES,
    CONFIG_MODEL,
    DEFAULT_SESSION_NAME,
    SESSION_MODEL,
    PosSession,
    SessionState,
)

logger = logging.getLogger(__name__)


class SessionManager:
    """Till session lifecycle: discover, open and close against the remote.

    Nothing is cached here; every call re-reads the session from the remote
    system, which stays the only source of truth for its state.
    """

    def __init__(self, client: RemoteRecordClient, session_name: str = DEFAULT_SESSION_NAME) -> None:
        self.client = client
        self.session_name = session_name

    async def get_active_config_id(self, context: RequestContext | None = None) -> int:
        response = await self.client.search_read(
            CONFIG_MODEL,
            [[["active", "=", True]]],
            keywords(context, fields=["id"], limit=1, offset=0),
        )
        rows = unwrap_result(response)
        config_id = as_int(field(rows[0], "id")) if _first_is_record(rows) else 0
        if config_id <= 0:
            raise NoActiveConfigError(code="NO_ACTIVE_CONFIG", message="No active POS Config")
        return config_id

    async def find_session(self, config_id: int, context: RequestContext | None = None) -> PosSession | None:
        response = await self.client.search_read(
            SESSION_MODEL,
            [[
                ["config_id", "=", config_id],
                ["state", "in", [state.value for state in ACTIVE_SESSION_STATES]],
            ]],
            keywords(context, fields=["id", "state"], order="id desc", limit=1, offset=0),
        )
        rows = unwrap_result(response)
        if not _first_is_record(rows):
            return None
        session_id = as_int(field(rows[0], "id"))
        if session_id <= 0:
            return None
        raw_state = as_text(field(rows[0], "state"))
        try:
            state = SessionState(raw_state)
        except ValueError:
            logger.warning("session_state_unknown", extra={"session_id": session_id, "state": raw_state})
            state = SessionState.OPENED
        return PosSession(id=session_id, state=state)

    async def ensure_open(self, session: PosSession, context: RequestContext | None = None) -> PosSession:
        """Advance a session still in opening control to opened."""
        if session.state is not SessionState.OPENING_CONTROL:
            return session
        logger.info("session_auto_open", extra={"session_id": session.id})
        await self._open(session.id, context)
        return PosSession(id=session.id, state=SessionState.OPENED)

    async def get_open_session_id(self, context: RequestContext | None = None) -> int | None:
        context = context or RequestContext()
        config_id = await self.get_active_config_id(context)
        session = await self.find_session(config_id, context)
        if session is None:
            return None
        # TODO: move to an explicit ensure-open call in the facade so this read stops mutating the till.
        session = await self.ensure_open(session, context)
        return session.id

    async def get_session_state(self, context: RequestContext | None = None) -> SessionState:
        session_id = await self.get_open_session_id(context)
        return SessionState.CLOSED if session_id is None else SessionState.OPENED

    async def open_store(self, context: RequestContext | None = None) -> int:
        context = context or RequestContext()
        existing = await self.get_open_session_id(context)
        if existing is not None:
            logger.info("open_store_existing_session", extra={"session_id": existing})
            return existing

        config_id = await self.get_active_config_id(context)
        response = await self.client.create(
            SESSION_MODEL,
            [{"config_id": config_id, "name": self.session_name}],
            keywords(context),
        )
        session_id = extract_created_id(unwrap_result(response))
        logger.info("session_created", extra={"session_id": session_id, "config_id": config_id})
        # A failure below leaves the created session in opening control; it is not rolled back.
        await self._open(session_id, context)
        return session_id

    async def close_store(self, context: RequestContext | None = None) -> bool:
        context = context or RequestContext()
        session_id = await self.get_open_session_id(context)
        if session_id is None:
            raise NoOpenSessionError(code="NO_OPEN_SESSION", message="No open POS session to close.")

        unwrap_result(
            await self.client.write(
                SESSION_MODEL,
                [session_id],
                {"state": SessionState.CLOSING_CONTROL.value},
                keywords(context),
            )
        )
        unwrap_result(
            await self.client.call_method(
                SESSION_MODEL,
                ACTION_SESSION_CLOSING_CONTROL,
                [session_id],
                keywords(context),
            )
        )
        logger.info("session_closing_control", extra={"session_id": session_id})
        return True

    async def _open(self, session_id: int, context: RequestContext | None) -> None:
        unwrap_result(
            await self.client.call_method(
                SESSION_MODEL,
                ACTION_SESSION_OPEN,
                [session_id],
                keywords(context),
            )
        )


def _first_is_record(rows: object) -> bool:
    return isinstance(rows, list) and bool(rows) and isinstance(rows[0], dict)

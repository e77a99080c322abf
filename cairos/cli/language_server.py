from __future__ import annotations

import logging
from typing import Callable

from lsprotocol import types
from pygls.server import LanguageServer

from cairos.domain.exceptions import DomainError

from .activity import DEBOUNCE_WINDOW_SECONDS, ActivityDebouncer, EditorEvent


logger = logging.getLogger(__name__)

SERVER_NAME = "cairos-language-server"
SERVER_VERSION = "1.0.0"


def event_from_did_open(params: types.DidOpenTextDocumentParams) -> EditorEvent:
    document = params.text_document
    return EditorEvent.opened(document.uri, language=document.language_id or None)


def event_from_did_change(params: types.DidChangeTextDocumentParams) -> EditorEvent:
    change = params.content_changes[0] if params.content_changes else None
    # Full-document changes carry no range.
    change_range = getattr(change, "range", None)
    if change_range is None:
        return EditorEvent.changed(params.text_document.uri)
    return EditorEvent.changed(
        params.text_document.uri,
        line_number=change_range.start.line,
        cursor_pos=change_range.start.character,
    )


def event_from_did_save(params: types.DidSaveTextDocumentParams) -> EditorEvent:
    return EditorEvent.saved(params.text_document.uri)


class CairosLanguageServer(LanguageServer):
    def __init__(
        self,
        *,
        send: Callable[[EditorEvent], None],
        window_seconds: float = DEBOUNCE_WINDOW_SECONDS,
    ):
        super().__init__(SERVER_NAME, SERVER_VERSION)
        self.debouncer = ActivityDebouncer(
            send=send,
            window_seconds=window_seconds,
            on_send_error=self.report_send_error,
        )

    def report_send_error(self, exc: DomainError) -> None:
        self.show_message_log(
            f"Error when trying to send events: {exc}",
            types.MessageType.Error,
        )


def build_language_server(
    *,
    send: Callable[[EditorEvent], None],
    window_seconds: float = DEBOUNCE_WINDOW_SECONDS,
) -> CairosLanguageServer:
    server = CairosLanguageServer(send=send, window_seconds=window_seconds)

    @server.feature(types.INITIALIZED)
    def initialized(ls: CairosLanguageServer, params: types.InitializedParams) -> None:
        logger.info("language_server: initialized")
        ls.show_message_log("Cairos language server initialized", types.MessageType.Info)

    # Handlers below run on the worker pool.
    @server.feature(types.TEXT_DOCUMENT_DID_OPEN)
    @server.thread()
    def did_open(ls: CairosLanguageServer, params: types.DidOpenTextDocumentParams) -> None:
        ls.debouncer.handle(event_from_did_open(params))

    @server.feature(types.TEXT_DOCUMENT_DID_CHANGE)
    @server.thread()
    def did_change(ls: CairosLanguageServer, params: types.DidChangeTextDocumentParams) -> None:
        ls.debouncer.handle(event_from_did_change(params))

    @server.feature(types.TEXT_DOCUMENT_DID_SAVE)
    @server.thread()
    def did_save(ls: CairosLanguageServer, params: types.DidSaveTextDocumentParams) -> None:
        ls.debouncer.handle(event_from_did_save(params))

    return server

"""csslens LSP server using pygls."""

from __future__ import annotations

import logging

from lsprotocol import types as lsp
from pygls.lsp.server import LanguageServer

from .document import TextDocument
from .facts import CSSDataManager, DataProvider, default_data_manager
from .hover import CSSHover
from .nodes import Node
from .parser import parse_stylesheet

logger = logging.getLogger(__name__)


class CSSLensServer(LanguageServer):
    """LSP server with documentation hovers for CSS."""

    def __init__(self, data: DataProvider | None = None):
        super().__init__("csslens", "v0.1.0")
        self.data = data
        self._hover: CSSHover | None = None
        # Caches
        self._doc_trees: dict[str, tuple[int, TextDocument, Node]] = {}  # uri -> (version, doc, tree)

    def configure(self, init_options):
        """Apply initialization options sent by the client."""
        if not isinstance(init_options, dict):
            return
        custom_data = init_options.get("customData")
        if isinstance(custom_data, list):
            paths = [p for p in custom_data if isinstance(p, str)]
            if paths and self.data is None:
                self.data = CSSDataManager(paths)
                logger.info("Loaded %d custom data file(s)", len(paths))

    def _hover_service(self) -> CSSHover:
        """Lazily create the hover service once client capabilities are known."""
        if self._hover is None:
            try:
                capabilities = self.client_capabilities
            except AttributeError:
                capabilities = None
            self._hover = CSSHover(capabilities, self.data or default_data_manager())
        return self._hover

    def _parse_doc(self, uri: str, text: str, version: int | None) -> tuple[TextDocument, Node]:
        """Parse a document, using cache when possible."""
        version = version or 0
        cached = self._doc_trees.get(uri)
        if cached and cached[0] == version:
            return cached[1], cached[2]
        document = TextDocument(text, uri=uri, version=version)
        tree = parse_stylesheet(text)
        self._doc_trees[uri] = (version, document, tree)
        return document, tree

    def _hover_doc(self, uri: str, text: str, version: int | None, position: lsp.Position) -> lsp.Hover | None:
        document, tree = self._parse_doc(uri, text, version)
        return self._hover_service().do_hover(document, position, tree)


def _create_server(data: DataProvider | None = None) -> CSSLensServer:
    """Create and configure the LSP server with all handlers."""
    server = CSSLensServer(data)

    @server.feature(lsp.INITIALIZE)
    def on_initialize(params: lsp.InitializeParams):
        server.configure(params.initialization_options)

    @server.feature(lsp.TEXT_DOCUMENT_DID_OPEN)
    def did_open(params: lsp.DidOpenTextDocumentParams):
        doc = params.text_document
        server._parse_doc(doc.uri, doc.text, doc.version)

    @server.feature(lsp.TEXT_DOCUMENT_DID_CLOSE)
    def did_close(params: lsp.DidCloseTextDocumentParams):
        server._doc_trees.pop(params.text_document.uri, None)

    @server.feature(lsp.TEXT_DOCUMENT_HOVER)
    def hover(params: lsp.HoverParams) -> lsp.Hover | None:
        uri = params.text_document.uri
        doc = server.workspace.get_text_document(uri)
        return server._hover_doc(uri, doc.source, doc.version, params.position)

    return server


def start_server(data: DataProvider | None = None):
    """Start the LSP server on stdio."""
    server = _create_server(data)
    server.start_io()

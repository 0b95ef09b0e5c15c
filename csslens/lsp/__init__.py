"""Language server support for CSS hovers."""


def start_server(data=None):
    """Start the LSP server on stdio (requires the ``lsp`` extra)."""
    from .server import start_server as _start_server
    _start_server(data)

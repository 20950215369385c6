"""
Temporary static file server for previewing the rendered page and serving
the JSON content locally.
"""
import logging
import os
import shutil
import socket
import tempfile
import threading
from functools import partial
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

logger = logging.getLogger(__name__)


class _QuietHandler(SimpleHTTPRequestHandler):
    def log_message(self, format, *args):
        logger.debug("%s - %s", self.address_string(), format % args)


class StaticSiteServer:
    def __init__(self, root: str | Path | None = None):
        self.server = None
        self.server_thread = None
        # a root we created ourselves is removed again on stop()
        self._owns_root = root is None
        self.root = Path(root) if root is not None else None
        self.port = None
        self.is_running = False

    def start(self) -> str:
        """
        Serve ``root`` (or a fresh temp directory) on a free port.
        Returns the base URL. Any server this instance already runs is
        stopped first.
        """
        if self.is_running:
            self.stop()

        if self.root is None:
            self.root = Path(tempfile.mkdtemp())
            self._owns_root = True

        self.port = self._find_free_port()
        handler = partial(_QuietHandler, directory=str(self.root))
        self.server = ThreadingHTTPServer(("127.0.0.1", self.port), handler)

        self.server_thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.server_thread.start()
        self.is_running = True
        logger.info("Serving %s at %s", self.root, self.url)
        return self.url

    def stop(self):
        """Stop the server and clean up resources"""
        if self.server:
            self.server.shutdown()
            self.server.server_close()
            self.server = None

        if self.server_thread:
            self.server_thread.join(timeout=2)  # Wait up to 2 seconds
            self.server_thread = None

        if self._owns_root and self.root and os.path.exists(self.root):
            shutil.rmtree(self.root, ignore_errors=True)
            self.root = None

        self.is_running = False

    @property
    def url(self) -> str | None:
        if self.is_running:
            return f"http://127.0.0.1:{self.port}/"
        return None

    def publish(self, html_content: str, filename: str = "index.html") -> str:
        """
        Write ``html_content`` into the served directory, starting the server
        if needed. Returns the URL of the file.
        """
        if not self.is_running:
            self.start()
        html_path = self.root / filename
        html_path.parent.mkdir(parents=True, exist_ok=True)
        html_path.write_text(html_content, encoding="utf-8")
        return f"{self.url}{filename}"

    def _find_free_port(self) -> int:
        """Find a free port to use for the server"""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", 0))
            s.listen(1)
            port = s.getsockname()[1]
        return port

    def __enter__(self) -> "StaticSiteServer":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


# Global instance for quick previews
_preview_server = StaticSiteServer()


def serve_html_temporarily(html_content: str, filename: str = "index.html") -> str:
    """
    Serve a rendered page from a temporary directory.
    Reuses the running preview server if there is one.
    """
    return _preview_server.publish(html_content, filename)


def cleanup_temp_server():
    """Stop and cleanup the preview server"""
    _preview_server.stop()

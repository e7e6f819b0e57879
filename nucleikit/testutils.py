"""Helpers for integration tests: running the scanner binary and a TCP test server."""

from __future__ import annotations

import re
import socket
import subprocess
import threading
from typing import Callable, Optional, Sequence

NUCLEI_BINARY = "./nuclei"

_TEMPLATES_LOADED = re.compile(r"(?:Templates|Workflows) loaded: (\d+)")


def _run_and_split(command: list[str], debug: bool) -> list[str]:
    completed = subprocess.run(
        command,
        stdout=subprocess.PIPE,
        stderr=None if debug else subprocess.PIPE,
        check=True,
    )
    lines = completed.stdout.decode("utf-8", errors="replace").split("\n")
    return [line for line in lines if line]


def run_nuclei_and_get_results(template: str, url: str, debug: bool, *args: str) -> list[str]:
    """Run the scanner with a template against ``url`` and return its non-empty output lines."""
    mode = "-debug" if debug else "-silent"
    command = [NUCLEI_BINARY, "-t", template, "-target", url, mode, *args]
    return _run_and_split(command, debug)


def run_nuclei_workflow_and_get_results(
    template: str, url: str, debug: bool, *args: str
) -> list[str]:
    """Run the scanner with a workflow against ``url`` and return its non-empty output lines."""
    mode = "-debug" if debug else "-silent"
    command = [NUCLEI_BINARY, "-w", template, "-target", url, mode, *args]
    return _run_and_split(command, debug)


def run_nuclei_binary_and_get_loaded_templates(nuclei_binary: str, args: Sequence[str]) -> str:
    """Run a scanner binary and return the first reported count of loaded templates."""
    completed = subprocess.run(
        [nuclei_binary, *args],
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        check=True,
    )
    match = _TEMPLATES_LOADED.search(completed.stdout.decode("utf-8", errors="replace"))
    if match is None:
        raise LookupError("no matches found")
    return match.group(1)


class TCPServer:
    """A local TCP server that hands each connection to ``handler`` in its own thread."""

    def __init__(self, handler: Callable[[socket.socket], None]) -> None:
        self._handler = handler
        self._closed = threading.Event()
        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        self._listener.bind(("127.0.0.1", 0))
        self._listener.listen()
        self._listener.settimeout(0.1)
        host, port = self._listener.getsockname()
        self.url = f"{host}:{port}"
        self._thread: Optional[threading.Thread] = threading.Thread(
            target=self._serve, daemon=True
        )
        self._thread.start()

    def _serve(self) -> None:
        while not self._closed.is_set():
            try:
                conn, _ = self._listener.accept()
            except socket.timeout:
                continue
            except OSError:
                if self._closed.is_set():
                    break
                continue
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            self._handler(conn)

    def close(self) -> None:
        """Stop accepting connections and release the listening socket."""
        self._closed.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        self._listener.close()

    def __enter__(self) -> "TCPServer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
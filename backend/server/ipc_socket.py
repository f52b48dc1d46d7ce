"""
Local IPC socket lifecycle.

Responsibilities:
- Bind the filesystem-addressed Unix socket the daemon listens on
- Restrict it to the owning user (never world-connectable, not even
  between bind() and chmod())
- Remove it at startup (stale file from a crash) and at shutdown
"""

from __future__ import annotations

import contextlib
import os
import socket
import stat

from spec import SOCKET_BIND_UMASK, SOCKET_PERMISSIONS


class SocketPathInUse(FileExistsError):
    """Raised when the socket path exists and is not a socket."""


def remove_socket_file(path: str) -> None:
    """
    Unlink a socket file if present. Idempotent.

    Refuses to delete anything that is not a socket.
    """
    try:
        mode = os.lstat(path).st_mode
    except FileNotFoundError:
        return

    if not stat.S_ISSOCK(mode):
        raise SocketPathInUse(f"{path} exists and is not a socket")

    with contextlib.suppress(FileNotFoundError):
        os.unlink(path)


def bind_unix_socket(path: str) -> socket.socket:
    """
    Create, bind and lock down the listening socket.

    The returned socket is not yet listening; the server calls listen()
    when it starts serving on it.
    """
    remove_socket_file(path)

    sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
    old_umask = os.umask(SOCKET_BIND_UMASK)
    try:
        sock.bind(path)
    except OSError:
        sock.close()
        raise
    finally:
        os.umask(old_umask)

    os.chmod(path, SOCKET_PERMISSIONS)
    return sock

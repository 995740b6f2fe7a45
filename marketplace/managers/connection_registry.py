import threading

from marketplace.api.ws.connection import ClientConnection
from marketplace.logging import logger


class ConnectionRegistry:
    """
    Bookkeeping of which live connections belong to which user and session.

    Two maps are kept, each behind its own lock:

    - user id -> set of connections (one user, many devices). A user id is
      present only while its set is non-empty.
    - session id -> connection (one connection per session, last
      registration wins).

    Every method holds a lock only for the map operation itself and returns
    copies, so callers send to connections after the lock is released.
    None of the methods raise.
    """

    def __init__(self) -> None:
        self._user_connections: dict[str, set[ClientConnection]] = {}
        self._session_connections: dict[str, ClientConnection] = {}
        self._user_lock = threading.Lock()
        self._session_lock = threading.Lock()

    # ------------------------------------------------------------------
    # user -> connections
    # ------------------------------------------------------------------

    def register_user_connection(
        self, user_id: str, connection: ClientConnection
    ) -> None:
        """
        Adds a connection to the set of connections for ``user_id``.

        Registering the same connection twice is a no-op.
        """
        with self._user_lock:
            self._user_connections.setdefault(user_id, set()).add(connection)

        logger.debug(
            f"Connection {connection.connection_id} registered for user {user_id}"
        )

    def unregister_user_connection(self, connection: ClientConnection) -> None:
        """
        Removes a connection from every user entry that holds it.

        Entries whose set becomes empty are deleted. A handle is expected
        under one user only; finding it under more is logged.
        """
        owners: list[str] = []

        with self._user_lock:
            for user_id, connections in list(self._user_connections.items()):
                if connection in connections:
                    connections.discard(connection)
                    owners.append(user_id)
                    if not connections:
                        del self._user_connections[user_id]

        if len(owners) > 1:
            logger.warning(
                f"Connection {connection.connection_id} was registered for "
                f"several users: {owners}"
            )
        elif owners:
            logger.debug(
                f"Connection {connection.connection_id} removed for user {owners[0]}"
            )

    def connections_for(self, user_id: str) -> list[ClientConnection]:
        """
        Snapshot of the connections of ``user_id``.

        Returns:
            A new list; empty if the user has no live connection.
        """
        with self._user_lock:
            return list(self._user_connections.get(user_id, ()))

    def all_connections(self) -> list[ClientConnection]:
        """Snapshot of every registered connection across all users."""
        with self._user_lock:
            return [
                connection
                for connections in self._user_connections.values()
                for connection in connections
            ]

    # ------------------------------------------------------------------
    # session -> connection
    # ------------------------------------------------------------------

    def register_session_connection(
        self, session_id: str, connection: ClientConnection
    ) -> ClientConnection | None:
        """
        Maps ``session_id`` to ``connection``, replacing any earlier mapping.

        Returns:
            The connection previously registered for the session, if it was
            a different one. The superseded connection is left open.
        """
        with self._session_lock:
            previous = self._session_connections.get(session_id)
            self._session_connections[session_id] = connection

        if previous is not None and previous is not connection:
            logger.debug(
                f"Session {session_id} moved from connection "
                f"{previous.connection_id} to {connection.connection_id}"
            )
            return previous

        return None

    def unregister_session_connection(
        self, connection: ClientConnection
    ) -> None:
        """Removes the session entry pointing at ``connection``, if any."""
        with self._session_lock:
            session_id = next(
                (
                    key
                    for key, value in self._session_connections.items()
                    if value is connection
                ),
                None,
            )
            if session_id is not None:
                del self._session_connections[session_id]

        if session_id is not None:
            logger.debug(
                f"Connection {connection.connection_id} removed for session {session_id}"
            )

    def connection_for(self, session_id: str) -> ClientConnection | None:
        with self._session_lock:
            return self._session_connections.get(session_id)

    # ------------------------------------------------------------------

    def unregister(self, connection: ClientConnection) -> None:
        """Drops every mapping of ``connection`` (used on disconnect)."""
        self.unregister_user_connection(connection)
        self.unregister_session_connection(connection)

    def stats(self) -> dict[str, int]:
        with self._user_lock:
            users = len(self._user_connections)
            user_connections = sum(
                len(connections)
                for connections in self._user_connections.values()
            )
        with self._session_lock:
            sessions = len(self._session_connections)

        return {
            "users": users,
            "connections": user_connections,
            "sessions": sessions,
        }

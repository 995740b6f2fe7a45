from enum import IntEnum, StrEnum


class RSPCode(IntEnum):
    """
    Response code enumeration for indicating operation results and error states.

    This enum defines standard response codes used throughout the application to
    represent different operation outcomes and error conditions.

    Attributes:
        OK (0): Operation completed successfully
        ERROR (1): General error occurred
        INVALID_DATA (2): Provided data is invalid or malformed
        PERMISSION_DENIED (3): User lacks required permissions for the operation

    Example:
        >>> status = RSPCode.OK
        >>> str(status)
        'RSPCode.OK<0>'
    """

    OK = 0
    ERROR = 1
    INVALID_DATA = 2
    PERMISSION_DENIED = 3

    def __str__(self):
        """
        Returns a string representation of the enum member in the format example "RSPCode.OK<0>".
        """
        return f"{__class__.__name__}.{self.name}<{self.value}>"


class PkgID(IntEnum):
    """
    Package identifier enumeration for inbound realtime requests.

    Attributes:
        REQUEST_SESSION_DATA (1): Return the projection of the caller's session
        RE_REGISTER_SESSION (2): Re-validate the caller's session on the live connection
        FORCE_LOGOUT_LOCAL (3): Terminate the caller's own session connection
        UNREGISTERED_HANDLER (999): Test-only PkgID with no registered handler
    """

    REQUEST_SESSION_DATA = 1
    RE_REGISTER_SESSION = 2
    FORCE_LOGOUT_LOCAL = 3
    UNREGISTERED_HANDLER = 999  # For testing handler not found scenarios


class ClientEvent(StrEnum):
    """Names of server-pushed events a client can receive."""

    ERROR = "Error"
    REGISTERED = "Registered"
    RECEIVE_NOTIFICATION = "ReceiveNotification"
    FORCE_LOGOUT = "ForceLogout"


class ConnectionState(StrEnum):
    """
    Lifecycle of a single realtime connection.

    CONNECTING -> VALIDATING -> REGISTERED -> DISCONNECTED. A failed
    validation goes straight to DISCONNECTED; re-registration moves a
    REGISTERED connection back through VALIDATING.
    """

    CONNECTING = "connecting"
    VALIDATING = "validating"
    REGISTERED = "registered"
    DISCONNECTED = "disconnected"

"""Error taxonomy shared by services and the API layer."""


class MamaChefError(Exception):
    """Base class for application errors."""

    code = "E_APP"

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = message


class GatewayError(MamaChefError):
    """The model service could not produce a reply."""

    code = "E_GATEWAY"


class ConfigError(GatewayError):
    """No credential is configured for the model service."""

    code = "E_CONFIG"


AuthError = ConfigError


class UpstreamError(GatewayError):
    """The model service answered with a non-success status."""

    code = "E_UPSTREAM"

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"Model service returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class NetworkError(GatewayError):
    """The model service could not be reached."""

    code = "E_NETWORK"


class ReconciliationError(MamaChefError):
    """A tracker action was blocked."""

    code = "E_RECONCILIATION"


class MalformedPayload(ReconciliationError):
    code = "E_MALFORMED_PAYLOAD"


class EmptySelection(ReconciliationError):
    code = "E_EMPTY_SELECTION"


class UnconfirmedLowConfidence(ReconciliationError):
    code = "E_UNCONFIRMED_LOW_CONFIDENCE"


class InvalidPortion(ReconciliationError):
    code = "E_INVALID_PORTION"


class UnknownItem(ReconciliationError):
    code = "E_UNKNOWN_ITEM"


class ConversationBusy(MamaChefError):
    """A message is already awaiting a reply in this conversation."""

    code = "E_BUSY"


class EmptyMessage(MamaChefError):
    code = "E_EMPTY_MESSAGE"


class UnknownSession(MamaChefError):
    code = "E_UNKNOWN_SESSION"


class UnknownQuickAction(MamaChefError):
    code = "E_UNKNOWN_QUICK_ACTION"


class InvalidImage(MamaChefError):
    code = "E_INVALID_IMAGE"


class InvalidTimezone(MamaChefError):
    code = "E_INVALID_TIMEZONE"


class InvalidRequest(MamaChefError):
    """Request body or parameters failed validation."""

    code = "E_INVALID_REQUEST"

"""Exceptions raised while turning a webhook delivery into a silence."""


class NullifierError(Exception):
    """Base class for per-event processing failures."""


class SignatureError(NullifierError):
    """Webhook signature is missing or does not match the signing secret."""


class EnvelopeError(NullifierError):
    """Webhook payload could not be decoded into an event envelope."""


class IncidentDataError(NullifierError):
    """Incident record is missing data needed to build a silence."""

    def __init__(self, incident_id: str, message: str):
        self.incident_id = incident_id
        super().__init__(f"{message} for incident {incident_id}")


class NoLabelsError(IncidentDataError):
    """The firing narrative did not yield any labels."""

    def __init__(self, incident_id: str):
        super().__init__(incident_id, "no labels found in firing details")


class SilenceSubmitError(NullifierError):
    """Alertmanager rejected the silence or could not be reached."""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(message)

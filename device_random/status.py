"""Health check response for the device service."""

STATUS_RESPONSE = "pong"


def status_handler() -> str:
    return STATUS_RESPONSE

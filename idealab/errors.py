"""Error taxonomy for the idea lab round trips.

Everything raised inside a round trip derives from ``IdeaLabError`` so the
session can catch it at one boundary, classify it and turn it into a display
string. ``ConfigurationRequired`` and the guard refusals are not failures:
they leave the session untouched.
"""

import json
from typing import Dict, Optional


class IdeaLabError(Exception):
    """Base class for every error this package raises on purpose."""

    kind = "unknown"

    def details(self) -> Dict[str, Optional[str]]:
        return {"kind": self.kind, "message": str(self)}


# -- preconditions ------------------------------------------------------------


class ConfigurationRequired(IdeaLabError):
    kind = "configuration_required"

    def __init__(self, message: str = "An API key is required before contacting the model."):
        super().__init__(message)


class RequestInFlight(IdeaLabError):
    kind = "in_flight"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"A {operation} request is already in flight.")


class NoIdea(IdeaLabError):
    kind = "no_idea"

    def __init__(self, message: str = "Generate an idea before requesting an evaluation."):
        super().__init__(message)


# -- gateway ------------------------------------------------------------------

AUTH = "auth"
QUOTA = "quota"
NETWORK = "network"
UNKNOWN = "unknown"


class GatewayError(IdeaLabError):
    """The model gateway failed before returning any text."""

    def __init__(self, category: str, message: str, status: Optional[int] = None):
        self.category = category
        self.status = status
        super().__init__(message)

    @property
    def kind(self) -> str:
        return {
            AUTH: "auth_error",
            QUOTA: "quota_exceeded",
            NETWORK: "network_error",
        }.get(self.category, "unknown")

    def details(self) -> Dict[str, Optional[str]]:
        data = super().details()
        data["status"] = str(self.status) if self.status is not None else None
        return data


# -- response contract --------------------------------------------------------


class ContractViolation(IdeaLabError):
    """The model answered, but not with what the prompt asked for."""

    kind = "contract_violation"


class NoJsonFound(ContractViolation):
    kind = "no_json_found"

    def __init__(self, cleaned_text: str):
        self.cleaned_text = cleaned_text
        super().__init__(f"No valid JSON found in response: {cleaned_text}")

    def details(self) -> Dict[str, Optional[str]]:
        data = super().details()
        data["text"] = self.cleaned_text
        return data


class MalformedJson(ContractViolation):
    kind = "malformed_json"

    def __init__(self, reason: str, fragment: str):
        self.reason = reason
        self.fragment = fragment
        super().__init__(f"Malformed JSON in response: {reason}")

    def details(self) -> Dict[str, Optional[str]]:
        data = super().details()
        data["fragment"] = self.fragment
        return data


class MissingField(ContractViolation):
    kind = "missing_field"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidField(ContractViolation):
    kind = "invalid_field"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid value for field {field}: {reason}")


# -- display ------------------------------------------------------------------

_GATEWAY_MESSAGES = {
    AUTH: "Invalid API key. Please check the API key configured for your model provider.",
    QUOTA: "API quota exceeded. Please check your usage limits.",
    NETWORK: "Network error. Please check your internet connection.",
}


def describe_failure(action: str, exc: Exception) -> str:
    """
    Human readable message for the ``error`` slot, e.g.
    "Failed to generate idea. Network error. Please check your internet connection."
    """
    prefix = f"Failed to {action}. "
    if isinstance(exc, GatewayError) and exc.category in _GATEWAY_MESSAGES:
        if exc.category == AUTH and "PERMISSION_DENIED" in str(exc):
            return prefix + "Permission denied. Please ensure your API key has the correct permissions."
        return prefix + _GATEWAY_MESSAGES[exc.category]
    if isinstance(exc, ContractViolation):
        return prefix + f"The model did not return the expected format: {exc}"
    return prefix + f"Error: {str(exc) or 'Unknown error occurred'}"


def failure_details(exc: Exception) -> str:
    """Diagnostic trace for the ``diagnostic`` slot."""
    if isinstance(exc, IdeaLabError):
        data = exc.details()
    else:
        data = {"kind": "unknown", "message": str(exc), "name": type(exc).__name__}
    return "Error details: " + json.dumps(data, indent=2)

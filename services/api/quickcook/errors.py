from __future__ import annotations


class QuickCookError(Exception):
    status_code: int = 500
    default_message: str = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationFailed(QuickCookError):
    status_code = 400
    default_message = "Invalid request."


class Unauthenticated(QuickCookError):
    status_code = 401
    default_message = "Invalid or missing token."


class InvalidCredentials(QuickCookError):
    status_code = 401
    default_message = "Invalid email or password."


class NotFoundOrDenied(QuickCookError):
    status_code = 404
    default_message = "Not found."

    def __init__(self, kind: str = "resource", message: str | None = None):
        super().__init__(message or f"{kind.capitalize()} not found.")
        self.kind = kind


class DuplicateResource(QuickCookError):
    status_code = 409
    default_message = "Resource already exists."


class AggregateWriteFailed(QuickCookError):
    status_code = 500
    default_message = "Failed to save changes."

    def __init__(self, operation: str, message: str | None = None):
        super().__init__(message)
        self.operation = operation

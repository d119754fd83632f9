"""
Ошибки пайплайна агрегации. kind уходит в JSON-ответ, чтобы клиент мог
различать причины отказа.
"""
from __future__ import annotations


class TimelogError(RuntimeError):
    kind = "internal_error"
    status_code = 500


class ConfigurationMissingError(TimelogError):
    kind = "configuration_missing"
    status_code = 500


class InvalidInputError(TimelogError):
    kind = "invalid_input"
    status_code = 400


class InvalidDurationError(InvalidInputError):
    pass


class UpstreamHttpError(TimelogError):
    kind = "upstream_http_error"
    status_code = 502

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class UpstreamProtocolError(TimelogError):
    kind = "upstream_protocol_error"
    status_code = 502

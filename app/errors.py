"""
Errores de dominio de la API.

Los servicios lanzan estas excepciones; main.py las traduce a respuestas
JSON con la forma {"error": "<mensaje>"} y el status HTTP de cada clase.
"""
from typing import Any, Optional


class AppError(Exception):
    status_code = 500

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"error": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(AppError):
    status_code = 400


class UnauthorizedError(AppError):
    status_code = 401


class NotFoundError(AppError):
    status_code = 404


class ConflictError(AppError):
    status_code = 409


class TooManyAttemptsError(AppError):
    status_code = 429


class ServerError(AppError):
    status_code = 500

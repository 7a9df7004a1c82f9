# errors.py - Request-terminal errors, rendered as {"error": code}


class ApiError(Exception):
    status_code = 400

    def __init__(self, code):
        super().__init__(code)
        self.code = code


class ValidationError(ApiError):
    status_code = 400


class ConflictError(ApiError):
    status_code = 400


class InvalidCredentials(ApiError):
    status_code = 400


class NotFound(ApiError):
    status_code = 404


class Forbidden(ApiError):
    status_code = 403

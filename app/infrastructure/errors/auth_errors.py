from fastapi import HTTPException, status


class InvalidCredentials(HTTPException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Invalid credentials"

    def __init__(self):
        super().__init__(
            status_code=self.status_code,
            detail=self.detail,
        )


class Unauthorized(HTTPException):
    status_code = status.HTTP_401_UNAUTHORIZED
    detail = "Unauthorized"

    def __init__(self):
        super().__init__(
            status_code=self.status_code,
            detail=self.detail,
        )


class MissingCredentials(HTTPException):
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Username and password required"

    def __init__(self):
        super().__init__(
            status_code=self.status_code,
            detail=self.detail,
        )

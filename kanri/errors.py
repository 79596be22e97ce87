from fastapi import HTTPException


class MissingField(HTTPException):
    def __init__(self, detail: str = "username and password required"):
        super().__init__(status_code=400, detail=detail)


class InvalidArgument(HTTPException):
    def __init__(self, detail: str = "invalid argument"):
        super().__init__(status_code=400, detail=detail)


class InvalidCredentials(HTTPException):
    def __init__(self):
        super().__init__(status_code=401, detail="invalid credentials")


class Forbidden(HTTPException):
    def __init__(self, detail: str = "admin only"):
        super().__init__(status_code=403, detail=detail)


class DuplicateUsername(HTTPException):
    def __init__(self):
        super().__init__(status_code=409, detail="username exists")


class StorageError(HTTPException):
    def __init__(self):
        super().__init__(status_code=500, detail="db error")


class Redirect(Exception):
    """Short-circuits a request with a 302 to ``location``."""

    def __init__(self, location: str):
        super().__init__(location)
        self.location = location

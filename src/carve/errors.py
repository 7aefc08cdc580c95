from __future__ import annotations


class CarveError(Exception):
    pass


class ProfileNotFound(CarveError):
    def __init__(self, username: str):
        super().__init__(f"No profile named '{username}'")
        self.username = username


class LeadError(CarveError):
    pass


class DataFileError(CarveError):
    def __init__(self, path, reason: str):
        super().__init__(f"Cannot read data file {path}: {reason}")
        self.path = path

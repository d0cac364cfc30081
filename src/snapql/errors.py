"""Store-level errors.

These propagate unmodified to the caller; the messages are shown to the user
verbatim.
"""


class SnapQLError(Exception):
    """Base class for snapql errors."""


class ConnectionAlreadyExistsError(SnapQLError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Connection '{name}' already exists")


class ConnectionNotFoundError(SnapQLError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Connection '{name}' not found")


class InvalidConnectionNameError(SnapQLError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Invalid connection name: '{name}'")

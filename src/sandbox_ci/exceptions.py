class UnrecoverableError(ValueError):
    """Base class for all unrecoverable errors in sandbox-ci."""

    pass


class MissingConfigurationError(UnrecoverableError):
    """Raised when a setting required by an operation is not set."""

    pass


class MissingCredentialError(UnrecoverableError):
    """Raised when the token for the active provider is not set."""

    def __init__(self, token_name: str):
        super().__init__(f"{token_name} is not set")
        self.token_name = token_name


class InvalidRepositoryError(UnrecoverableError):
    """Raised when a repository slug is not in owner/name format."""

    pass


class InvalidConfigurationError(UnrecoverableError):
    """Raised when a setting cannot be parsed from the environment."""

    pass

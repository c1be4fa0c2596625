class SyncError(Exception):
    """Base class for every failure the sync loop knows how to classify."""


class EnvironmentUnavailableError(SyncError):
    """The host environment (Docker, instance metadata, credentials) is unreachable."""


class RuntimeUnavailableError(EnvironmentUnavailableError):
    pass


class MetadataUnavailableError(EnvironmentUnavailableError):
    pass


class ConfigurationError(SyncError):
    pass


class TargetGroupNotFoundError(SyncError):
    def __init__(self, name: str, matches: int = 0):
        self.name = name
        self.matches = matches
        reason = "no target group" if matches == 0 else f"{matches} target groups"
        super().__init__(f"Expected exactly one target group named '{name}', found {reason}")


class LoadBalancerError(SyncError):
    def __init__(self, message: str, code: str | None = None):
        self.code = code
        super().__init__(f"{message} ({code})" if code else message)

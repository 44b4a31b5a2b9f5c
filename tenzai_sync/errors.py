"""Sync error taxonomy. Everything except LocalReadFailed is recoverable per record."""


class SyncError(Exception):
    pass


class LookupFailed(SyncError):
    pass


class DuplicateMatch(LookupFailed):
    """More than one remote record shares the natural key (policy 'error')."""


class CreateFailed(SyncError):
    pass


class UpdateFailed(SyncError):
    pass


class WriteBackFailed(SyncError):
    def __init__(self, message, remote_id):
        super().__init__(message)
        self.remote_id = remote_id


class ConnectivityFailed(SyncError):
    pass


class LocalReadFailed(SyncError):
    pass

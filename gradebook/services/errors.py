# gradebook/services/errors.py


class GradebookError(Exception):
    pass


class RecordNotFound(GradebookError):
    pass


class InvalidRequest(GradebookError):
    pass


class PermissionDenied(GradebookError):
    pass

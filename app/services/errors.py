class AssignmentError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInput(AssignmentError):
    status_code = 400


class Forbidden(AssignmentError):
    status_code = 403


class SourceNotFound(AssignmentError):
    status_code = 404


class NotFound(AssignmentError):
    status_code = 404


class CopyFailed(AssignmentError):
    """La copia radice (o la riga di atribuicao) non è stata creata."""
    status_code = 500


class DeleteFailed(AssignmentError):
    status_code = 500

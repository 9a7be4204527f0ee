from __future__ import annotations


class DocumentQAError(Exception):
    status_code = 500


class ValidationError(DocumentQAError):
    status_code = 400


class NotReadyError(DocumentQAError):
    status_code = 400

    def __init__(
        self,
        message: str = "Documents have not been uploaded and parsed yet.  Call /upload-documents first.",
    ) -> None:
        super().__init__(message)


class _DocumentError(DocumentQAError):
    """Failure tied to one document reference."""

    def __init__(self, ref: str, cause: BaseException | str) -> None:
        self.ref = ref
        self.cause = cause
        super().__init__(f"Failed to parse PDF from {ref}: {cause}")


class FetchError(_DocumentError):
    pass


class ParseError(_DocumentError):
    pass


class GenerationError(DocumentQAError):
    def __init__(self, cause: BaseException | str, *, partial_answer: str = "") -> None:
        self.cause = cause
        self.partial_answer = partial_answer
        super().__init__(str(cause))

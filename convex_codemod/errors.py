"""Exceptions raised while migrating a project."""


class CodemodError(Exception):
    """Base error for the codemod."""

    def __init__(self, message: str, phase: str = "rewrite"):
        super().__init__(message)
        self.phase = phase


class SourceParseError(CodemodError):
    """Source text could not be parsed cleanly."""

    def __init__(self, message: str):
        super().__init__(message, phase="parse")


class UnsupportedImportError(CodemodError):
    """A generated-code import uses a form the rewriter cannot relocate."""

    def __init__(self, message: str):
        super().__init__(message, phase="imports")


class EditConflictError(CodemodError):
    """Two edits to the same document overlap."""

    def __init__(self, message: str):
        super().__init__(message, phase="render")


class ProjectError(CodemodError):
    """The target directory is not a usable Convex project."""

    def __init__(self, message: str):
        super().__init__(message, phase="project")

"""
Exceptions raised by the OData code generator.

Every error is fatal for a generation run: either the complete output is
produced or nothing is written.
"""

from typing import Optional


class CodegenError(Exception):
    """Base class for all code generator errors."""


class ReadError(CodegenError):
    """The metadata input (file or service endpoint) could not be read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Could not read metadata from {source}: {reason}")


class ParseError(CodegenError):
    """The metadata input is not a well-formed Edmx document."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class PolicyError(CodegenError):
    """A generation policy file has an invalid structure."""


class UnsupportedLanguageError(CodegenError):
    """No emitter is registered for the requested target language."""

    def __init__(self, language: str, supported=()):
        self.language = language
        message = f"Unsupported language: {language}"
        if supported:
            message += f" (supported: {', '.join(supported)})"
        super().__init__(message)

"""Exceptions raised while turning a compiler request into generated files."""


class ProtofilterError(Exception):
    """Base class for protofilter failures."""


class GenerationError(ProtofilterError):
    """Raised when a request cannot be turned into output files."""


class InvalidParameterError(GenerationError):
    """Raised for an unknown or malformed generator parameter."""


class UnknownFileError(GenerationError):
    """Raised when a file to generate is missing from the request."""

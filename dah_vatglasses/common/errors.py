"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for conversion failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class FormatError(PipelineError):
    """Raised when a document cannot be read in its detected or declared format."""

    error_code = "FORMAT_ERROR"


class ConversionError(PipelineError):
    """Raised when parsing or conversion fails for an unexpected reason."""

    error_code = "CONVERSION_ERROR"


class ContractError(PipelineError):
    """Raised when the produced VATGlasses document breaks its structural contract."""

    error_code = "CONTRACT_ERROR"

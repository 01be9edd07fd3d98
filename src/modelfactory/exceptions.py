# Custom exceptions for modelfactory

class ModelFactoryError(Exception):
    """Base exception for all application-specific errors."""
    pass

class ParserError(ModelFactoryError):
    """Raised when a Dart source file cannot be read or scanned."""
    def __init__(self, file_path: str, message: str):
        self.file_path = file_path
        self.message = message
        super().__init__(f"Failed to parse {file_path}: {message}")

class InvalidGenerationSourceError(ModelFactoryError):
    """Raised when @ModelFactory is attached to something that is not a class."""
    def __init__(self, element_name: str, message: str, element_kind: str = ""):
        self.element_name = element_name
        self.element_kind = element_kind
        self.message = message
        super().__init__(f"{message} (element: '{element_name}'"
                         + (f", kind: {element_kind})" if element_kind else ")"))

class ConfigError(ModelFactoryError):
    """Raised for configuration-related problems."""
    pass

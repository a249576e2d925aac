class ConversionError(Exception):
    code = "CONVERSION_ERROR"

    def __init__(self, message: str, detail=None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class DecodeFailure(ConversionError):
    code = "DECODE_FAILURE"


class StructureNotFound(ConversionError):
    code = "STRUCTURE_NOT_FOUND"


class UnexpectedShape(ConversionError):
    code = "UNEXPECTED_SHAPE"

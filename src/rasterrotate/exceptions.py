class RasterRotateError(Exception):
    pass


class InvalidInputError(RasterRotateError, ValueError):
    pass


class RotationError(RasterRotateError):
    pass


class BatchProcessingError(RasterRotateError):
    pass

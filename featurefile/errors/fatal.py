# FILE: featurefile/errors/fatal.py
# ------------------------------------------------------------------------------
class FatalError(Exception):
    def __init__(self, message, context=None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ConfigError(FatalError):
    pass


class SchemaError(FatalError):
    pass


class FeatureFileError(FatalError):
    """A feature file could not be decoded. Never carries a partial result."""

    def __init__(self, message, source, context=None):
        ctx = {"source": source}
        ctx.update(context or {})
        self.source = source
        super().__init__(message, ctx)


class TruncatedHeaderError(FeatureFileError):
    def __init__(self, source, bytes_read):
        self.bytes_read = bytes_read
        super().__init__(
            f"Cannot read frame count from '{source}': header needs 4 bytes, got {bytes_read}",
            source,
            {"bytes_read": bytes_read, "error_code": "truncated_header"},
        )


class TruncatedFrameDataError(FeatureFileError):
    def __init__(self, source, feature, frame_index, bytes_expected, bytes_read):
        self.feature = feature
        self.frame_index = frame_index
        super().__init__(
            f"Unexpected end of '{source}' while reading feature '{feature}' at frame {frame_index}",
            source,
            {
                "feature": feature,
                "frame_index": frame_index,
                "bytes_expected": bytes_expected,
                "bytes_read": bytes_read,
                "error_code": "truncated_frame_data",
            },
        )

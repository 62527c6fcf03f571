# FILE: featurefile/decode/parser.py
# ------------------------------------------------------------------------------
import io
import logging
import os
from typing import BinaryIO, Dict, Iterable, Optional, Tuple

import numpy as np

from featurefile.diagnostics.sink import DiagnosticCode, DiagnosticEvent, DiagnosticsSink, LoggingSink
from featurefile.errors.fatal import FeatureFileError, SchemaError, TruncatedFrameDataError, TruncatedHeaderError
from featurefile.schema.descriptor import FeatureDescriptor

HEADER_DTYPE = np.dtype("<i4")
HEADER_SIZE = HEADER_DTYPE.itemsize
READ_CHUNK_SIZE = 1 << 20


class DecodedFeatureSet(Dict[str, np.ndarray]):
    """Feature name to decoded values, in schema order.

    `frame_count` is the raw header value (may be zero or negative);
    `skipped` names the features whose type marker was not recognized.
    """

    def __init__(self, frame_count: int = 0, skipped: Tuple[str, ...] = ()):
        super().__init__()
        self.frame_count = frame_count
        self.skipped = skipped


def _read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read up to `size` bytes, stopping early only at end of stream."""
    chunks = []
    remaining = size
    while remaining > 0:
        chunk = stream.read(min(remaining, READ_CHUNK_SIZE))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


class FeatureFileDecoder:
    """
    Decodes feature files laid out as::

        int32 frame_count
        feature 0: frame_count values
        feature 1: frame_count values
        ...

    All fields are little-endian with no padding. Values are read per
    feature, in schema order, each feature's frames stored contiguously.
    """

    def __init__(self, descriptors: Optional[Iterable[FeatureDescriptor]], sink: Optional[DiagnosticsSink] = None):
        self._descriptors: Tuple[FeatureDescriptor, ...] = tuple(descriptors or ())
        seen = set()
        for index, descriptor in enumerate(self._descriptors):
            if descriptor.name in seen:
                raise SchemaError(f"Duplicate feature name '{descriptor.name}'", context={"index": index})
            seen.add(descriptor.name)
        self.sink = sink or LoggingSink()
        if not self._descriptors:
            self._emit(
                DiagnosticCode.EMPTY_SCHEMA,
                logging.WARNING,
                "No feature definitions supplied; decoded files will contain no features",
            )

    @property
    def descriptors(self) -> Tuple[FeatureDescriptor, ...]:
        return self._descriptors

    @property
    def recognized(self) -> Tuple[FeatureDescriptor, ...]:
        return tuple(d for d in self._descriptors if d.kind is not None)

    def _emit(self, code, level, message, error=None, **context):
        self.sink.emit(DiagnosticEvent(code, level, message, context, error))

    def decode_file(self, path) -> DecodedFeatureSet:
        source = os.fspath(path)
        try:
            with open(source, "rb") as handle:
                return self._decode(handle, source)
        except (FeatureFileError, OSError) as e:
            self._report_failure(source, e)
            raise

    def decode_bytes(self, data: bytes, source: str = "<bytes>") -> DecodedFeatureSet:
        with io.BytesIO(data) as stream:
            return self.decode(stream, source)

    def decode(self, stream: BinaryIO, source: str = "<stream>") -> DecodedFeatureSet:
        try:
            return self._decode(stream, source)
        except (FeatureFileError, OSError) as e:
            self._report_failure(source, e)
            raise

    def _report_failure(self, source, error):
        self._emit(
            DiagnosticCode.DECODE_FAILED,
            logging.ERROR,
            f"Failed to decode feature file '{source}': {error}",
            error=error,
            source=source,
            error_code=error.context.get("error_code") if isinstance(error, FeatureFileError) else "io_error",
        )

    def _decode(self, stream: BinaryIO, source: str) -> DecodedFeatureSet:
        header = _read_exact(stream, HEADER_SIZE)
        if len(header) < HEADER_SIZE:
            raise TruncatedHeaderError(source, len(header))
        frame_count = int(np.frombuffer(header, dtype=HEADER_DTYPE)[0])
        self._emit(
            DiagnosticCode.HEADER_READ,
            logging.INFO,
            f"Feature file '{source}' contains {frame_count} frames",
            source=source,
            frame_count=frame_count,
        )

        skipped = tuple(d.name for d in self._descriptors if d.kind is None)
        features = DecodedFeatureSet(frame_count, skipped)

        if frame_count <= 0:
            self._emit(
                DiagnosticCode.NO_FRAMES,
                logging.WARNING,
                f"Feature file '{source}' has no data frames (frame_count={frame_count}); returning empty features",
                source=source,
                frame_count=frame_count,
            )
            for d in self.recognized:
                features[d.name] = np.empty(0, dtype=d.dtype)
            return features

        for descriptor in self._descriptors:
            if descriptor.kind is None:
                self._emit(
                    DiagnosticCode.UNSUPPORTED_TYPE,
                    logging.WARNING,
                    f"Feature '{descriptor.name}' has unsupported type '{descriptor.type_char}'; skipping",
                    source=source,
                    feature=descriptor.name,
                    type_char=descriptor.type_char,
                )
                continue
            features[descriptor.name] = self._read_feature(stream, source, descriptor, frame_count)

        self._emit(
            DiagnosticCode.DECODE_SUMMARY,
            logging.INFO,
            f"Decoded {len(features)} features from '{source}' ({frame_count} frames)",
            source=source,
            feature_count=len(features),
            frame_count=frame_count,
        )
        return features

    @staticmethod
    def _read_feature(stream, source, descriptor, frame_count) -> np.ndarray:
        expected = frame_count * descriptor.width
        block = _read_exact(stream, expected)
        if len(block) < expected:
            raise TruncatedFrameDataError(
                source,
                descriptor.name,
                len(block) // descriptor.width,
                descriptor.width,
                len(block) % descriptor.width,
            )
        # frombuffer returns a read-only view over the block.
        return np.frombuffer(block, dtype=descriptor.dtype).copy()

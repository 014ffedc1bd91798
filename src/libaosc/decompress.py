"""xz decompression for downloaded package indexes."""

import lzma

from libaosc.errors import DecompressionError

XZ_MAGIC = b"\xfd7zXZ\x00"


def is_xz(data: bytes) -> bool:
    """Return True if data starts with the xz stream header magic."""
    return bytes(data[: len(XZ_MAGIC)]) == XZ_MAGIC


class StreamDecoder:
    """Incrementally decode a single xz stream, or pass bytes through unchanged.

    Feed chunks as they arrive, then call finish() once the source is exhausted
    to make sure the stream was complete.
    """

    def __init__(self, compressed: bool):
        self.compressed = compressed
        self._decompressor = lzma.LZMADecompressor(format=lzma.FORMAT_XZ) if compressed else None
        self.bytes_in = 0
        self.bytes_out = 0

    def feed(self, chunk: bytes) -> bytes:
        """Decode the next chunk of input and return whatever output it produced."""
        self.bytes_in += len(chunk)
        if self._decompressor is None:
            output = bytes(chunk)
        elif self._decompressor.eof:
            if chunk:
                raise DecompressionError("Unexpected data after the end of the xz stream")
            output = b""
        else:
            try:
                output = self._decompressor.decompress(chunk)
            except lzma.LZMAError as e:
                raise DecompressionError(f"Malformed xz stream: {e}") from e
        self.bytes_out += len(output)
        return output

    def finish(self) -> None:
        """Check that the input formed one complete xz stream.

        Raises:
            DecompressionError: The stream was truncated or followed by extra data
        """
        if self._decompressor is None:
            return
        if not self._decompressor.eof:
            raise DecompressionError(f"xz stream ended unexpectedly after {self.bytes_in} bytes")
        if self._decompressor.unused_data:
            raise DecompressionError("Unexpected data after the end of the xz stream")


def decompress(data: bytes, compressed: bool) -> bytes:
    """Decode a fully buffered index."""
    decoder = StreamDecoder(compressed)
    output = decoder.feed(data)
    decoder.finish()
    return output

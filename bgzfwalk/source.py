"""
Provides the byte sources the block walker reads members from.

Any object with read(n), skip(n) and tell() can be walked. These wrap the usual inputs:
binary streams and objects exposing the buffer protocol (bytes, bytearray, mmap).
"""

import io
import os

SKIP_CHUNK_SIZE = 2 ** 16
"""int: Largest read used to discard data from streams that can not seek."""


class _Source:
    """
    Base class for stream and buffer sources.
    """

    def read(self, n: int) -> bytes:
        """
        Read up to n bytes, fewer only if the input is exhausted.
        """
        raise NotImplementedError()

    def skip(self, n: int) -> int:
        """
        Advance past up to n bytes without returning them.
        :return: Number of bytes actually skipped, less than n only if the input is exhausted.
        """
        raise NotImplementedError()

    def tell(self) -> int:
        raise NotImplementedError()

    @property
    def size(self):
        """Total length of the input in bytes, or None if unknown."""
        return None


def Source(input, offset: int = 0) -> _Source:
    """
    Factory to provide a unified source interface.
    Resolves if input is randomly accessible and provides the appropriate _Source implementation.
    :param input: A stream, buffer or object already implementing read(), skip() and tell().
    :param offset: If input is a buffer, the offset into the buffer to begin reading. Ignored otherwise.
    :return: An instance of StreamSource or BufferSource, or input itself.
    """
    if isinstance(input, _Source):
        return input
    if isinstance(input, (io.RawIOBase, io.BufferedIOBase)):
        return StreamSource(input)
    if all(hasattr(input, attr) for attr in ('read', 'skip', 'tell')):
        return input
    if hasattr(input, 'read'):
        # File like objects outside the io hierarchy, SpooledTemporaryFile for example
        return StreamSource(input)
    return BufferSource(input, offset)


class StreamSource(_Source):
    """
    Implements _Source over a binary stream.
    Seekable streams are skipped with seek(), others are read and discarded.
    """

    def __init__(self, stream):
        """
        Constructor.
        :param stream: Binary stream positioned at the first member.
        """
        self._stream = stream
        seekable = getattr(stream, 'seekable', None)
        self._seekable = seekable() if seekable else hasattr(stream, 'seek') and hasattr(stream, 'tell')
        self._position = stream.tell() if self._seekable else 0

    def read(self, n):
        data = bytearray()
        while len(data) < n:
            chunk = self._stream.read(n - len(data))
            if not chunk:
                break
            data += chunk
        self._position += len(data)
        return bytes(data)

    def skip(self, n):
        if self._seekable:
            end = self._stream.seek(0, os.SEEK_END)
            target = min(self._position + n, end)
            self._stream.seek(target)
            skipped = target - self._position
            self._position = target
            return skipped
        skipped = 0
        while skipped < n:
            chunk = self._stream.read(min(SKIP_CHUNK_SIZE, n - skipped))
            if not chunk:
                break
            skipped += len(chunk)
        self._position += skipped
        return skipped

    def tell(self):
        return self._position

    @property
    def size(self):
        if not self._seekable:
            return None
        try:
            return os.fstat(self._stream.fileno()).st_size
        except (AttributeError, OSError, io.UnsupportedOperation):
            # In memory streams have no descriptor
            end = self._stream.seek(0, os.SEEK_END)
            self._stream.seek(self._position)
            return end


class BufferSource(_Source):
    """
    Implements _Source over an object supporting the buffer protocol.
    Reads slice the buffer, skips only move the offset.
    """

    def __init__(self, buffer, offset=0):
        """
        Constructor.
        :param buffer: Buffer object to read from.
        :param offset: The offset into the buffer to begin reading from.
        """
        self._buffer = memoryview(buffer)
        self._len = len(self._buffer)
        self.offset = min(offset, self._len)

    def read(self, n):
        start = self.offset
        self.offset = min(start + n, self._len)
        return bytes(self._buffer[start:self.offset])

    def skip(self, n):
        start = self.offset
        self.offset = min(start + n, self._len)
        return self.offset - start

    def tell(self):
        return self.offset

    @property
    def size(self):
        return self._len

    def __len__(self):
        return self._len

    def release(self):
        """Release the view so the underlying buffer, an mmap for example, can be closed."""
        self._buffer.release()

import mmap
import os
import stat

MAGIC = b'\x1F\x8B'
"""bytes: Magic bytes identifying a GZIP/BGZF member"""

COMPRESSION_METHOD = 8
"""int: GZIP compression method for DEFLATE, the only one BGZF uses."""

FLAGS = 4
"""int: GZIP flag byte of a BGZF member, only FEXTRA set."""

BGZF_SUBFIELD_LENGTH = 2
"""int: Expected SLEN of the BC subfield, the two byte block size."""

EMPTY_BLOCK = b'\x1f\x8b\x08\x04\x00\x00\x00\x00\x00\xff\x06\x00\x42\x43\x02\x00\x1b\x00\x03\x00\x00\x00\x00\x00\x00\x00\x00\x00'
"""bytes: This is the byte data representing an empty block. This is used as an EOF marker at the end of BGZF compressed files."""

SIZEOF_EMPTY_BLOCK = len(EMPTY_BLOCK)
"""int: Number of bytes that the empty block occupies."""


def is_bgzf(buffer, offset=0):
    """
    Helper to determine if passed buffer contains a BGZF block.
    :param buffer: Buffer containing unknown data.
    :param offset: Offset into buffer to being reading.
    :return: True if offset points to beginning of a BGZF block, False otherwise.
    """
    return bytes(buffer[offset:offset + 2]) == MAGIC


def has_eof_marker(buffer):
    """
    Helper to check that a buffer ends with the BGZF EOF marker.
    :param buffer: Buffer containing a complete BGZF file.
    :return: True if the last bytes are the canonical empty block.
    """
    return len(buffer) >= SIZEOF_EMPTY_BLOCK and bytes(buffer[-SIZEOF_EMPTY_BLOCK:]) == EMPTY_BLOCK


def open_buffer(path) -> mmap.mmap:
    """
    Open a file as a read only memory mapped buffer.
    :param path: String containing path to file.
    :return: mmap instance mapped to the specified file.
    """
    fh = os.open(path, os.O_RDONLY)
    try:
        stat_result = os.fstat(fh)
        if not stat.S_ISREG(stat_result.st_mode):
            raise ValueError("Can not open pipe as buffer.")
        if not stat_result.st_size:
            raise ValueError("File size can not be 0.")
        return mmap.mmap(fh, 0, access=mmap.ACCESS_READ)
    finally:
        # The mapping holds its own reference to the file
        os.close(fh)


class InvalidBGZF(ValueError):
    """
    Exception to indicate invalid or unexpected data was read while trying to parse BGZF data.
    """
    pass


class InvalidMagic(InvalidBGZF):
    """The member does not start with the GZIP magic bytes."""
    pass


class UnsupportedGzipVariant(InvalidBGZF):
    """The member is GZIP but does not follow the BGZF header profile."""
    pass


class MalformedBlockSize(InvalidBGZF):
    """The block size subfield is too small to hold the header, extra field and trailer."""
    pass


class TruncatedMember(InvalidBGZF):
    """The input ended part way through a member."""
    pass


class MissingEOFMarker(InvalidBGZF):
    """The input ended between members without an EOF marker having been read."""
    pass


class CleanEndOfFile(EOFError):
    """Signals that the input is exhausted exactly on a member boundary."""
    pass


class TruncatedFileWarning(UserWarning):
    """
    Warning to indicate the empty BGZF block marking EOF is missing, data is possibly truncated.
    """
    pass

import ctypes as C
from enum import IntFlag

from .util import MalformedBlockSize


# Taken from RFC 1952
class BlockFlags(IntFlag):
    FTEXT = 1 << 0
    FHCRC = 1 << 1
    FEXTRA = 1 << 2
    FNAME = 1 << 3
    FCOMMENT = 1 << 4
    reserved1 = 1 << 5
    reserved2 = 1 << 6
    reserved3 = 1 << 7


class Header(C.LittleEndianStructure):
    """
    Represents BGZF/GZIP block header.
    """
    _pack_ = 1
    _fields_ = [
        ("id1", C.c_uint8),  # ID1   gzip IDentifier1            uint8 31
        ("id2", C.c_uint8),  # ID2   gzip IDentifier2            uint8 139
        ("compression_method", C.c_uint8),  # CM    gzip Compression Method     uint8 8
        ("flag", C.c_uint8),  # FLG   gzip FLaGs                  uint8 4
        ("modification_time", C.c_uint32),  # MTIME gzip Modification TIME      uint32
        ("extra_flags", C.c_uint8),  # XFL   gzip eXtra FLags            uint8
        ("os", C.c_uint8),  # OS    gzip Operating System       uint8
        ("extra_length", C.c_uint16)  # XLEN  gzip eXtra LENgth           uint16
    ]


SIZEOF_HEADER = C.sizeof(Header)


class BSIZE(C.LittleEndianStructure):
    """
    Represents the BGZF block size subfield, expected to lead the extra field.
    """
    _pack_ = 1
    _fields_ = [
        ("SI1", C.c_uint8),  # SI1 Subfield Identifier1        uint8 66
        ("SI2", C.c_uint8),  # SI2 Subfield Identifier2        uint8 67
        ("SLEN", C.c_uint16),  # SLEN Subfield LENgth uint16 t 2
        ("value", C.c_uint16)  # BSIZE total Block SIZE minus 1 uint16
    ]


SIZEOF_BSIZE = C.sizeof(BSIZE)


class Trailer(C.LittleEndianStructure):
    """
    Represents BGZF/GZIP block trailer.
    """
    _pack_ = 1
    _fields_ = [
        ("CRC32", C.c_uint32),  # CRC32 CRC-32                      uint32
        ("uncompressed_size", C.c_uint32)  # ISIZE Input SIZE (length of uncompressed data) uint32
    ]


SIZEOF_TRAILER = C.sizeof(Trailer)


def member_payload_length(block_size: int, extra_length: int) -> int:
    """
    Compute the length of the compressed data held by a member.
    A member is the header, the extra field, the compressed data and the trailer, BSIZE + 1 bytes in total.
    :param block_size: Value of the BSIZE subfield.
    :param extra_length: Value of the XLEN header field.
    :return: Number of compressed data bytes.
    """
    length = block_size + 1 - SIZEOF_HEADER - extra_length - SIZEOF_TRAILER
    if length < 0:
        raise MalformedBlockSize("Block size {} too small for an extra field of {} bytes.".format(block_size, extra_length))
    return length


class MemberReport:
    """
    Represents one decoded BGZF member.
    Only the fixed fields are kept, the compressed data is never loaded.
    """
    __slots__ = '_header', '_bsize', '_trailer', 'payload_length', 'offset', 'index'

    def __init__(self, header: Header, bsize: BSIZE, trailer: Trailer, payload_length: int, offset: int = 0, index: int = 1):
        """
        Constructor.
        :param header: Header object instance.
        :param bsize: BSIZE subfield instance.
        :param trailer: Trailer object instance.
        :param payload_length: Number of compressed data bytes between the extra field and the trailer.
        :param offset: Offset of the first member byte in the source.
        :param index: 1 based position of the member in the file.
        """
        self._header = header
        self._bsize = bsize
        self._trailer = trailer
        self.payload_length = payload_length
        self.offset = offset
        self.index = index

    @property
    def id(self):
        return (self._header.id1, self._header.id2)

    @property
    def compression_method(self):
        return self._header.compression_method

    @property
    def flags(self):
        return BlockFlags(self._header.flag)

    @property
    def modification_time(self):
        return self._header.modification_time

    @property
    def extra_flags(self):
        return self._header.extra_flags

    @property
    def os(self):
        return self._header.os

    @property
    def extra_length(self):
        return self._header.extra_length

    @property
    def subfield_id(self):
        return (self._bsize.SI1, self._bsize.SI2)

    @property
    def subfield_length(self):
        return self._bsize.SLEN

    @property
    def block_size(self):
        """Total size of the member on disk, BSIZE + 1."""
        return self._bsize.value + 1

    @property
    def CRC32(self):
        return self._trailer.CRC32

    @property
    def uncompressed_size(self):
        return self._trailer.uncompressed_size

    @property
    def is_terminal(self):
        """True for the empty block marking the end of a BGZF file."""
        return self._trailer.CRC32 == 0 and self._trailer.uncompressed_size == 0

    @property
    def header_bytes(self):
        return bytes(self._header)

    @property
    def size(self):
        """Number of bytes the member occupies in the source."""
        return SIZEOF_HEADER + self._header.extra_length + self.payload_length + SIZEOF_TRAILER

    def __len__(self):
        return self.size

    def __eq__(self, other):
        if not isinstance(other, MemberReport):
            return NotImplemented
        return (self.header_bytes, bytes(self._bsize), bytes(self._trailer), self.payload_length, self.offset, self.index) == \
               (other.header_bytes, bytes(other._bsize), bytes(other._trailer), other.payload_length, other.offset, other.index)

    def __repr__(self):
        return "MemberReport(index={}, offset={}, block_size={}, payload_length={}, CRC32={:#010x}, uncompressed_size={})".format(
            self.index, self.offset, self.block_size, self.payload_length, self.CRC32, self.uncompressed_size)

"""
Walks the members of a BGZF file without inflating them.

Each member is decoded from its fixed header, BGZF subfield and trailer. The compressed data
between them is skipped, only its length is needed to reach the next member.
"""

import warnings
from typing import Iterator

import bgzfwalk

from . import util
from .block import BSIZE, Header, MemberReport, SIZEOF_BSIZE, SIZEOF_HEADER, SIZEOF_TRAILER, Trailer, member_payload_length
from .source import Source
from .util import CleanEndOfFile, InvalidMagic, MissingEOFMarker, TruncatedFileWarning, TruncatedMember, UnsupportedGzipVariant


class BlockWalker:
    """
    Decodes members one after another from a byte source.
    Provides Iterator interface emitting a MemberReport per member, ending after the EOF marker.
    """

    def __init__(self, input, offset: int = 0, require_eof_marker: bool = None):
        """
        Constructor.
        :param input: Stream, buffer or source object positioned at the first member.
        :param offset: If input is a buffer, the offset into the buffer to begin reading. Ignored otherwise.
        :param require_eof_marker: Raise MissingEOFMarker instead of warning if the input ends without the EOF marker.
                                   Defaults to bgzfwalk.REQUIRE_EOF_MARKER, initialised from BGZFWALK_REQUIRE_EOF.
        """
        if require_eof_marker is None:
            require_eof_marker = bgzfwalk.REQUIRE_EOF_MARKER
        self.source = Source(input, offset)
        self.require_eof_marker = require_eof_marker
        self.total_in = 0
        self.count = 0
        self.finished = False
        self._walk = self.walk()

    def _read(self, size, offset, what) -> bytes:
        data = self.source.read(size)
        if len(data) != size:
            raise TruncatedMember("Member at offset {} truncated in {}: expected {} bytes, found {}.".format(offset, what, size, len(data)))
        return data

    def decode_next_member(self) -> MemberReport:
        """
        Decode the member at the current position and advance past it.
        :return: MemberReport for the decoded member.
        :raises CleanEndOfFile: If the source is exhausted before the first header byte.
        """
        offset = self.source.tell()
        data = self.source.read(SIZEOF_HEADER)
        if not data:
            raise CleanEndOfFile()
        if len(data) != SIZEOF_HEADER:
            raise TruncatedMember("Member at offset {} truncated in header: expected {} bytes, found {}.".format(offset, SIZEOF_HEADER, len(data)))
        header = Header.from_buffer_copy(data)
        if (header.id1, header.id2) != tuple(util.MAGIC):
            raise InvalidMagic("Invalid block header found at offset {}: ID1: {} ID2: {}".format(offset, header.id1, header.id2))
        if header.compression_method != util.COMPRESSION_METHOD or header.flag != util.FLAGS:
            raise UnsupportedGzipVariant("GZIP member at offset {} is not BGZF: CM: {} FLG: {}".format(offset, header.compression_method, header.flag))
        if header.extra_length < SIZEOF_BSIZE:
            raise UnsupportedGzipVariant("Extra field at offset {} too short for a block size subfield: XLEN: {}".format(offset, header.extra_length))

        bsize = BSIZE.from_buffer_copy(self._read(SIZEOF_BSIZE, offset, "extra field"))
        if bsize.SLEN != util.BGZF_SUBFIELD_LENGTH:
            raise UnsupportedGzipVariant("Unexpected block size subfield length at offset {}: SLEN: {}".format(offset, bsize.SLEN))
        payload_length = member_payload_length(bsize.value, header.extra_length)

        # Only the leading BC subfield is parsed, any others are skipped with the payload
        skip = header.extra_length - SIZEOF_BSIZE + payload_length
        skipped = self.source.skip(skip)
        if skipped != skip:
            raise TruncatedMember("Member at offset {} truncated in compressed data: expected {} bytes, found {}.".format(offset, skip, skipped))
        trailer = Trailer.from_buffer_copy(self._read(SIZEOF_TRAILER, offset, "trailer"))

        self.total_in += payload_length
        self.count += 1
        return MemberReport(header, bsize, trailer, payload_length, offset, self.count)

    def walk(self) -> Iterator[MemberReport]:
        """
        Lazily decode members until the EOF marker.
        A missing EOF marker is reported with TruncatedFileWarning, or MissingEOFMarker if required.
        Any other error ends the walk after the members before it have been emitted.
        """
        while not self.finished:
            try:
                report = self.decode_next_member()
            except CleanEndOfFile:
                self.finished = True
                if self.require_eof_marker:
                    raise MissingEOFMarker("Input ended at offset {} without an EOF marker.".format(self.source.tell()))
                warnings.warn("Missing EOF marker, data is possibly truncated.", TruncatedFileWarning)
                return
            except util.InvalidBGZF:
                self.finished = True
                raise
            if report.is_terminal:
                self.finished = True
            yield report

    def __iter__(self):
        return self

    def __next__(self) -> MemberReport:
        return next(self._walk)


def decode_next_member(input, offset: int = 0) -> MemberReport:
    """
    Decode a single member.
    :param input: Stream, buffer or source object positioned at the member.
    :param offset: If input is a buffer, the offset of the member. Ignored otherwise.
    :return: MemberReport for the member.
    """
    return BlockWalker(input, offset).decode_next_member()


def walk(input, offset: int = 0, require_eof_marker: bool = None) -> Iterator[MemberReport]:
    """
    Convenience wrapper creating a BlockWalker, itself an iterator of members.
    :param input: Stream, buffer or source object positioned at the first member.
    :param offset: If input is a buffer, the offset into the buffer to begin reading. Ignored otherwise.
    :param require_eof_marker: See BlockWalker.
    :return: Iterator of MemberReport.
    """
    return BlockWalker(input, offset, require_eof_marker)

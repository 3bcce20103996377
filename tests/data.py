import struct
import zlib

from bgzfwalk import EMPTY_BLOCK


def member(payload=b'', crc=0, isize=0, extra=b'', bsize=None, slen=2, magic=b'\x1f\x8b', cm=8, flg=4, xlen=None, mtime=0, xfl=0, os_id=0xff):
    """
    Pack a BGZF member. Sizes are derived from the payload unless given.
    """
    if xlen is None:
        xlen = 6 + len(extra)
    if bsize is None:
        bsize = 12 + xlen + len(payload) + 8 - 1
    header = magic + struct.pack('<BBIBBH', cm, flg, mtime, xfl, os_id, xlen)
    return header + b'BC' + struct.pack('<HH', slen, bsize) + extra + payload + struct.pack('<II', crc, isize)


def deflate(data):
    compressor = zlib.compressobj(9, zlib.DEFLATED, -15)
    return compressor.compress(data) + compressor.flush()


VALID_DATA = b'test123'
VALID_CDATA = deflate(VALID_DATA)
BLOCK_VALID = member(VALID_CDATA, zlib.crc32(VALID_DATA), len(VALID_DATA))
"""bytes: BGZF block holding VALID_DATA, without an EOF marker."""

ZERO_PAYLOAD_BLOCK = member()
"""bytes: Terminal member with no compressed data at all, BSIZE 25."""

FILE_VALID = BLOCK_VALID + EMPTY_BLOCK
"""bytes: Minimal complete BGZF file."""

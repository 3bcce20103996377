"""
Walks the block structure of BGZF compressed files without inflating them.

Classes:
    BlockWalker: Decodes members one after another and emits a MemberReport for each.
    MemberReport: Represents the fixed fields of one decoded BGZF member.
    Source: Factory wrapping a stream or buffer as a byte source.
    Narrator: Diagnostics sink writing a human readable description of each member.

Functions:
    walk: Lazily iterate the members of a BGZF file until the EOF marker.
    decode_next_member: Decode the member at the current position of a source.
    is_bgzf: Used to determine if a buffer begins with a BGZF member.
    has_eof_marker: Used to determine if a buffer ends with the BGZF EOF marker.

Constants:
    EMPTY_BLOCK bytes: This is the byte data representing an empty block. This is used as an EOF marker at the end of BGZF compressed files.
    REQUIRE_EOF_MARKER bool: Default for BlockWalker(require_eof_marker=), read from the BGZFWALK_REQUIRE_EOF environment variable.

Example:
    from bgzfwalk import walk
    with open("data.bam", 'rb') as stream_in:
        for report in walk(stream_in):
            ***Your logic here***

For more:
    >> help(bgzfwalk.block) for more information on the member structures.
    >> help(bgzfwalk.walker) for more information on the BlockWalker object.
    >> help(bgzfwalk.source) for more information on byte sources.
    >> help(bgzfwalk.diagnostics) for more information on reporting and the command line interface.
    >> help(bgzfwalk.util) for more information on constants, errors and buffer helpers.
"""

import os

REQUIRE_EOF_MARKER = os.getenv('BGZFWALK_REQUIRE_EOF', '').strip().lower() in ('1', 'true', 'yes', 'on')

from .__version import __version__
from .block import MemberReport
from .diagnostics import Narrator
from .source import Source
from .util import CleanEndOfFile, EMPTY_BLOCK, InvalidBGZF, InvalidMagic, MalformedBlockSize, MissingEOFMarker, SIZEOF_EMPTY_BLOCK, \
    TruncatedFileWarning, TruncatedMember, UnsupportedGzipVariant, has_eof_marker, is_bgzf
from .walker import BlockWalker, decode_next_member, walk

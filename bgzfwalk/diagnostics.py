"""
blocks
blocks.py [-q] [-s] [-e] in.bam|in.gz

Prints the size of the input file followed by a description of every BGZF block it contains, up to and including the EOF marker.
The compressed data of each block is skipped, not inflated, so no CRC32 checks are performed.

OPTIONS:

-q Only print the total number of compressed data bytes.
-s Print one line per block: index, offset, block size, compressed bytes, uncompressed bytes and whether it is the EOF marker.
-e Fail if the file ends without the EOF marker instead of printing a warning. Also enabled by setting BGZFWALK_REQUIRE_EOF=1.
-h Output this help and exit immediately.

EXIT STATUS:

0 on success, 1 if the file could not be read or is not valid BGZF, 2 on invalid usage.
"""

import getopt
import sys
import warnings
from typing import Iterable

from .block import MemberReport
from .source import BufferSource, StreamSource
from .util import InvalidBGZF, TruncatedFileWarning, open_buffer
from .walker import BlockWalker


class Narrator:
    """
    Diagnostics sink writing a human readable description of each member as it is decoded.
    """

    def __init__(self, out=None):
        """
        Constructor.
        :param out: Text stream to write to. Defaults to sys.stdout.
        """
        self.out = out or sys.stdout

    def __call__(self, report: MemberReport):
        header = report.header_bytes
        write = self.out.write
        write("\n######\n### BGZF Block {}\n######\n\n".format(report.index))
        write("  [*] Header: {}\n".format(' '.join('{:x}'.format(b) for b in header)))
        write("    - Modified time    => {}\n".format(':'.join(str(b) for b in reversed(header[4:8]))))
        write("    - Extra flags      => {:x}\n".format(report.extra_flags))
        write("    - Operating system => {:x}\n".format(report.os))
        write("    - Extra length     => {} bytes\n".format(report.extra_length))
        write("\n  [*] Block info:\n")
        write("    - Subfield identifier 1 => {:x}\n".format(report.subfield_id[0]))
        write("    - Subfield identifier 2 => {:x}\n".format(report.subfield_id[1]))
        write("    - Subfield length       => {}\n".format(report.subfield_length))
        write("    - Block size (minus 1)  => {}\n".format(report.block_size - 1))
        write("\n  [*] Data:\n")
        write("    - Compressed # of bytes => {}\n".format(report.payload_length))
        write("    - CRC32                 => {}\n".format(report.CRC32))
        write("    - Raw input length      => {}\n".format(report.uncompressed_size))

    def finish(self, walker: BlockWalker):
        """
        Write the closing totals of a walk.
        :param walker: The walker that produced the reports.
        """
        self.out.write("\n\nCounted {} compressed data bytes in total.\n".format(walker.total_in))


def summarize(reports: Iterable[MemberReport]) -> Iterable[str]:
    """
    Render reports as one tab separated line each, preceded by a column header line.
    :param reports: Reports to render, consumed lazily.
    :return: Generator of lines without line terminators.
    """
    yield "#index\toffset\tblock_size\tcompressed\tuncompressed\teof"
    for report in reports:
        yield "{}\t{}\t{}\t{}\t{}\t{}".format(report.index, report.offset, report.block_size, report.payload_length,
                                             report.uncompressed_size, 'yes' if report.is_terminal else 'no')


def _run(source, out, quiet, summary, require_eof_marker):
    walker = BlockWalker(source, require_eof_marker=require_eof_marker)
    if summary:
        for line in summarize(walker):
            out.write(line + '\n')
    else:
        narrate = Narrator(out)
        for report in walker:
            if not quiet:
                narrate(report)
        narrate.finish(walker)


def main(argv=None, out=None, err=None) -> int:
    """
    Command line entry point.
    :param argv: Argument list excluding the program name. Defaults to sys.argv[1:].
    :param out: Text stream for the report. Defaults to sys.stdout.
    :param err: Text stream for errors and warnings. Defaults to sys.stderr.
    :return: Exit status.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    try:
        opts, args = getopt.gnu_getopt(sys.argv[1:] if argv is None else argv, 'qseh')
    except getopt.GetoptError as e:
        err.write("{}\n{}".format(e, __doc__))
        return 2
    opts = dict(opts)
    if '-h' in opts:
        out.write(__doc__)
        return 0
    if len(args) != 1:
        err.write("\nUsage: blocks.py [-q] [-s] [-e] in.bam\n\n")
        return 2
    path = args[0]
    require_eof_marker = True if '-e' in opts else None

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always', TruncatedFileWarning)
        try:
            try:
                buffer = open_buffer(path)
            except ValueError:
                # Empty files and pipes can not be mapped
                buffer = None
            if buffer is not None:
                with buffer:
                    source = BufferSource(buffer)
                    try:
                        out.write("File size: {} bytes\n".format(source.size))
                        _run(source, out, '-q' in opts, '-s' in opts, require_eof_marker)
                    finally:
                        source.release()
            else:
                with open(path, 'rb') as stream:
                    source = StreamSource(stream)
                    out.write("File size: {} bytes\n".format(source.size if source.size is not None else 'unknown'))
                    _run(source, out, '-q' in opts, '-s' in opts, require_eof_marker)
        except OSError as e:
            err.write("Unable to read {}: {}\n".format(path, e))
            return 1
        except InvalidBGZF as e:
            err.write("Invalid BGZF data in {}: {}\n".format(path, e))
            return 1
    for warning in caught:
        err.write("Warning: {}\n".format(warning.message))
    return 0

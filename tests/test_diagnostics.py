from unittest import TestCase
import io
import os
import tempfile

from bgzfwalk import BlockWalker, EMPTY_BLOCK, Narrator
from bgzfwalk.diagnostics import main, summarize

from .data import BLOCK_VALID, FILE_VALID, VALID_CDATA


class TestNarrator(TestCase):
    def test_empty_block(self):
        out = io.StringIO()
        walker = BlockWalker(EMPTY_BLOCK)
        narrate = Narrator(out)
        for report in walker:
            narrate(report)
        narrate.finish(walker)
        text = out.getvalue()
        self.assertIn("### BGZF Block 1\n", text)
        self.assertIn("  [*] Header: 1f 8b 8 4 0 0 0 0 0 ff 6 0\n", text)
        self.assertIn("    - Modified time    => 0:0:0:0\n", text)
        self.assertIn("    - Operating system => ff\n", text)
        self.assertIn("    - Extra length     => 6 bytes\n", text)
        self.assertIn("    - Subfield identifier 1 => 42\n", text)
        self.assertIn("    - Subfield identifier 2 => 43\n", text)
        self.assertIn("    - Block size (minus 1)  => 27\n", text)
        self.assertIn("    - Compressed # of bytes => 2\n", text)
        self.assertIn("    - Raw input length      => 0\n", text)
        self.assertTrue(text.endswith("Counted 2 compressed data bytes in total.\n"))

    def test_summarize(self):
        lines = list(summarize(BlockWalker(FILE_VALID)))
        self.assertEqual(len(lines), 3)
        self.assertTrue(lines[0].startswith('#'))
        self.assertEqual(lines[1].split('\t'), ['1', '0', str(len(BLOCK_VALID)), str(len(VALID_CDATA)), '7', 'no'])
        self.assertEqual(lines[2].split('\t'), ['2', str(len(BLOCK_VALID)), '28', '2', '0', 'yes'])


class TestMain(TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, name, data):
        path = os.path.join(self.tmp, name)
        with open(path, 'wb') as f:
            f.write(data)
        return path

    def run_main(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        status = main(list(argv), out, err)
        return status, out.getvalue(), err.getvalue()

    def test_valid(self):
        status, out, err = self.run_main(self.write('valid.bam', FILE_VALID))
        self.assertEqual(status, 0)
        self.assertTrue(out.startswith("File size: {} bytes\n".format(len(FILE_VALID))))
        self.assertIn("### BGZF Block 2\n", out)
        self.assertIn("Counted {} compressed data bytes in total.".format(len(VALID_CDATA) + 2), out)
        self.assertEqual(err, '')

    def test_quiet(self):
        status, out, err = self.run_main('-q', self.write('valid.bam', FILE_VALID))
        self.assertEqual(status, 0)
        self.assertNotIn("### BGZF Block", out)
        self.assertIn("Counted {} compressed data bytes in total.".format(len(VALID_CDATA) + 2), out)

    def test_summary(self):
        status, out, err = self.run_main('-s', self.write('valid.bam', FILE_VALID))
        self.assertEqual(status, 0)
        self.assertEqual(len(out.splitlines()), 4)

    def test_missing_marker(self):
        path = self.write('truncated.bam', BLOCK_VALID)
        status, out, err = self.run_main(path)
        self.assertEqual(status, 0)
        self.assertIn("Missing EOF marker", err)
        status, out, err = self.run_main('-e', path)
        self.assertEqual(status, 1)
        self.assertIn("without an EOF marker", err)

    def test_empty_file(self):
        status, out, err = self.run_main(self.write('empty.bam', b''))
        self.assertEqual(status, 0)
        self.assertTrue(out.startswith("File size: 0 bytes\n"))
        self.assertIn("Missing EOF marker", err)

    def test_invalid(self):
        status, out, err = self.run_main(self.write('text.txt', b'this is not a BGZF file at all'))
        self.assertEqual(status, 1)
        self.assertIn("Invalid BGZF data", err)

    def test_missing_file(self):
        status, out, err = self.run_main(os.path.join(self.tmp, 'missing.bam'))
        self.assertEqual(status, 1)
        self.assertIn("Unable to read", err)

    def test_usage(self):
        self.assertEqual(self.run_main()[0], 2)
        self.assertEqual(self.run_main('-x', 'in.bam')[0], 2)
        status, out, err = self.run_main('-h')
        self.assertEqual(status, 0)
        self.assertIn("OPTIONS", out)

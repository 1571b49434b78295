"""Unit tests for PDF assembly."""

import unittest
import sys
import os
import tempfile
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from pdf_helpers import make_pdf, page_count, page_widths
from quote.assembler import AnnexLibrary, DocumentAssembler, StaticAssetReader
from quote.results import MergeError


class TestDocumentAssembler(unittest.TestCase):
    """Test page concatenation."""

    def setUp(self):
        self.assembler = DocumentAssembler()

    def test_merge_skips_empty_buffers(self):
        """Page counts [2, empty, 3] merge into 5 pages in order."""
        merged = self.assembler.merge([
            make_pdf(2, width=100),
            b'',
            None,
            make_pdf(3, width=200),
        ])

        self.assertEqual(page_count(merged), 5)
        self.assertEqual(page_widths(merged), [100, 100, 200, 200, 200])

    def test_merge_preserves_buffer_order(self):
        merged = self.assembler.merge([make_pdf(1, width=300), make_pdf(1, width=100)])
        self.assertEqual(page_widths(merged), [300, 100])

    def test_merge_nothing(self):
        merged = self.assembler.merge([None, b''])
        self.assertEqual(page_count(merged), 0)

    def test_malformed_buffer_raises(self):
        with self.assertRaises(MergeError):
            self.assembler.merge([make_pdf(1), b'this is not a pdf'])

    def test_reader_internal_error_raises_merge_error(self):
        with mock.patch('quote.assembler.PdfReader', side_effect=IndexError('list index out of range')):
            with self.assertRaises(MergeError) as ctx:
                self.assembler.merge([make_pdf(1)])
        self.assertIn('list index out of range', str(ctx.exception))


class TestStaticAssets(unittest.TestCase):
    """Test annex loading."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = self.tmp.name
        with open(os.path.join(self.root, 'anexo1.pdf'), 'wb') as f:
            f.write(make_pdf(1, width=301))
        with open(os.path.join(self.root, 'anexo3.pdf'), 'wb') as f:
            f.write(make_pdf(2, width=303))

    def tearDown(self):
        self.tmp.cleanup()

    def test_reader_returns_none_for_missing(self):
        reader = StaticAssetReader(self.root)

        self.assertIsNone(reader.read('anexo2.pdf'))
        self.assertEqual(page_widths(reader.read('anexo1.pdf')), [301])

    def test_annex_library_keeps_file_order(self):
        library = AnnexLibrary(StaticAssetReader(self.root), {
            'after_equipos': ['anexo1.pdf', 'anexo2.pdf'],
            'after_financiero': ['anexo3.pdf'],
        })

        first = library.get('after_equipos')
        self.assertEqual(len(first), 2)
        self.assertIsNone(first[1])
        self.assertEqual(page_widths(library.get('after_financiero')[0]), [303, 303])
        self.assertEqual(library.get('unknown'), ())


if __name__ == '__main__':
    unittest.main()

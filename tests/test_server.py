"""Tests for the HTTP boundary."""

import unittest
import sys
import os
import tempfile

from fastapi.testclient import TestClient

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quote.results import ErrorKind, StageResult
from quote.server import create_app
from quote.settings import Settings


class FakePipeline:
    """Records the request data and returns a canned result."""

    def __init__(self, result):
        self.result = result
        self.calls = []

    async def run(self, raw):
        self.calls.append(raw)
        return self.result


class TestServer(unittest.TestCase):
    """Test the quote endpoints."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        with open(os.path.join(self.tmp.name, 'index.html'), 'w', encoding='utf-8') as f:
            f.write('<html><body>portada</body></html>')
        self.settings = Settings(TEMPLATES_DIR=self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def _client(self, result):
        pipeline = FakePipeline(result)
        app = create_app(settings=self.settings, pipeline=pipeline)
        return TestClient(app), pipeline

    def test_health(self):
        client, _ = self._client(StageResult.success(b''))
        response = client.get('/health')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.text, 'ok')

    def test_templates_are_served(self):
        client, _ = self._client(StageResult.success(b''))
        response = client.get('/templates/index.html')

        self.assertEqual(response.status_code, 200)
        self.assertIn('portada', response.text)

    def test_render_success(self):
        client, pipeline = self._client(StageResult.success(b'%PDF-1.4 fake'))
        response = client.post('/render/cotizacion', json={'data': {'ENERGIA': 500}})

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers['content-type'], 'application/pdf')
        self.assertEqual(response.headers['content-disposition'], 'attachment; filename="cotizacion.pdf"')
        self.assertEqual(response.content, b'%PDF-1.4 fake')
        self.assertEqual(pipeline.calls, [{'ENERGIA': 500}])

    def test_missing_data_is_empty_input(self):
        client, pipeline = self._client(StageResult.success(b'%PDF'))
        client.post('/render/cotizacion', json={})

        self.assertEqual(pipeline.calls, [{}])

    def test_failure_plain_text(self):
        failed = StageResult.failed(ErrorKind.RENDER, 'render', 'navigation timeout')
        client, _ = self._client(failed)
        response = client.post('/render/cotizacion', json={'data': {}})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.text, 'Render failed')
        self.assertNotIn('navigation', response.text)

    def test_failure_debug_json(self):
        failed = StageResult.failed(ErrorKind.MERGE, 'merge', 'Buffer 2 is not a readable PDF')
        client, _ = self._client(failed)
        response = client.post('/render/cotizacion?debug=1', json={'data': {}})

        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'error': 'Render failed', 'detail': 'Buffer 2 is not a readable PDF'})


if __name__ == '__main__':
    unittest.main()

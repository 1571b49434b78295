"""Unit tests for page URLs and render deadlines."""

import unittest
import sys
import os
import asyncio
from unittest import mock

from playwright.async_api import Error as PlaywrightError

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from quote.renderer import PageRenderer, build_page_url
from quote.results import RenderError


class TestBuildPageUrl(unittest.TestCase):
    """Test template URL construction."""

    def test_without_params(self):
        url = build_page_url('http://127.0.0.1:3000', 'index.html')
        self.assertEqual(url, 'http://127.0.0.1:3000/templates/index.html')

    def test_skips_none_and_encodes(self):
        url = build_page_url('http://127.0.0.1:3000/', 'index3.html', {
            'TIR': '18,34%',
            'CLIENTE': 'Ana & Co',
            'PAGO1': '',
            'EMPRESA': None,
        })

        self.assertEqual(
            url,
            'http://127.0.0.1:3000/templates/index3.html'
            '?TIR=18%2C34%25&CLIENTE=Ana+%26+Co&PAGO1=',
        )


class TestPageRenderer(unittest.TestCase):
    """Test error mapping without launching a browser."""

    def test_deadline_raises_render_error(self):
        renderer = PageRenderer(timeout_seconds=0.05)

        async def slow(url):
            await asyncio.sleep(5)
            return b'%PDF'

        renderer._render = slow

        with self.assertRaises(RenderError) as ctx:
            asyncio.run(renderer.render('http://127.0.0.1:3000/templates/index.html'))
        self.assertIn('timed out', str(ctx.exception))

    def test_browser_error_raises_render_error(self):
        renderer = PageRenderer()

        async def broken(url):
            raise PlaywrightError('net::ERR_CONNECTION_REFUSED')

        renderer._render = broken

        with self.assertRaises(RenderError) as ctx:
            asyncio.run(renderer.render('http://127.0.0.1:9/templates/index.html'))
        self.assertIn('ERR_CONNECTION_REFUSED', str(ctx.exception))

    def test_success_returns_bytes(self):
        renderer = PageRenderer()

        async def ok(url):
            return b'%PDF-1.4'

        renderer._render = ok

        self.assertEqual(asyncio.run(renderer.render('http://x/templates/a.html')), b'%PDF-1.4')


def fake_playwright(goto_error=None):
    """Playwright stand-in: returns (async_playwright replacement, browser, page)."""
    page = mock.MagicMock()
    page.emulate_media = mock.AsyncMock()
    page.goto = mock.AsyncMock(side_effect=goto_error)
    page.pdf = mock.AsyncMock(return_value=b'%PDF-1.4')

    browser = mock.MagicMock()
    browser.new_page = mock.AsyncMock(return_value=page)
    browser.close = mock.AsyncMock()

    playwright = mock.MagicMock()
    playwright.chromium.launch = mock.AsyncMock(return_value=browser)

    manager = mock.MagicMock()
    manager.__aenter__ = mock.AsyncMock(return_value=playwright)
    manager.__aexit__ = mock.AsyncMock(return_value=False)

    return mock.MagicMock(return_value=manager), browser, page


class TestBrowserLifecycle(unittest.TestCase):
    """Test the browser session against a fake Playwright."""

    def test_navigation_failure_closes_browser(self):
        factory, browser, page = fake_playwright(PlaywrightError('net::ERR_NAME_NOT_RESOLVED'))

        with mock.patch('quote.renderer.async_playwright', factory):
            with self.assertRaises(RenderError) as ctx:
                asyncio.run(PageRenderer().render('http://127.0.0.1:3000/templates/index.html'))

        self.assertIn('ERR_NAME_NOT_RESOLVED', str(ctx.exception))
        browser.close.assert_awaited_once()
        page.pdf.assert_not_awaited()

    def test_success_prints_letter_and_closes_browser(self):
        factory, browser, page = fake_playwright()

        with mock.patch('quote.renderer.async_playwright', factory):
            pdf = asyncio.run(PageRenderer().render('http://127.0.0.1:3000/templates/index.html'))

        self.assertEqual(pdf, b'%PDF-1.4')
        page.emulate_media.assert_awaited_once_with(media='screen')
        self.assertEqual(page.goto.await_args.kwargs['wait_until'], 'networkidle')
        self.assertEqual(page.pdf.await_args.kwargs['format'], 'Letter')
        browser.close.assert_awaited_once()


if __name__ == '__main__':
    unittest.main()

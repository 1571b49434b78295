"""
Quote pipeline module.
Orchestrates field computation, page rendering and PDF assembly.
"""

import asyncio
import logging
from typing import Dict, Any, List, Mapping, Optional, Sequence

from .assembler import AnnexLibrary, DocumentAssembler, StaticAssetReader
from .fields import FieldComputer, PAYMENT_FIELDS
from .inputs import load_config
from .renderer import PageRenderer, build_page_url
from .results import ErrorKind, MergeError, RenderError, StageResult

logger = logging.getLogger(__name__)


PORTADA = 'portada'
EQUIPOS = 'equipos'
FINANCIERO = 'financiero'

ANNEXES_AFTER_EQUIPOS = 'after_equipos'
ANNEXES_AFTER_FINANCIERO = 'after_financiero'

PORTADA_FIELDS = ('EMPRESA', 'CLIENTE', 'CIUDAD', 'FECHA', 'POTENCIA', 'ENERGIA', 'FACTURA')
EQUIPOS_FIELDS = ('PANELES', 'INVERSORES')
FINANCIERO_FIELDS = (
    'INVERSION_TOTAL', 'BENEFICIO_TRIBUTARIO', 'RECUPERACION_INVERSION',
    'TIR', 'BC', 'AHORRO_TOTAL', 'ENERGIA',
)
# Keys the financial page reads with a '' fallback
FINANCIERO_OPTIONAL_FIELDS = ('AHORRO_MENSUAL',) + PAYMENT_FIELDS + ('IVA_MATERIALES', 'VPN', 'ROI')


def build_render_views(fields: Mapping[str, str]) -> Dict[str, Dict[str, Optional[str]]]:
    """
    Split computed fields into the query parameters of each page.

    Returns:
        Ordered mapping: portada, equipos, financiero
    """
    financiero = {name: fields.get(name) for name in FINANCIERO_FIELDS}
    financiero.update({name: fields.get(name) or '' for name in FINANCIERO_OPTIONAL_FIELDS})
    # the financial template spells the bill key FACTUIRA
    financiero['FACTUIRA'] = fields.get('FACTURA') or ''

    return {
        PORTADA: {name: fields.get(name) for name in PORTADA_FIELDS},
        EQUIPOS: {name: fields.get(name) for name in EQUIPOS_FIELDS},
        FINANCIERO: financiero,
    }


class QuotePipeline:
    """Builds the quote PDF for one request."""

    def __init__(self, field_computer: FieldComputer, renderer, annexes: AnnexLibrary,
                 base_url: str, pages: Mapping[str, str], concurrent: bool = True):
        """
        Args:
            field_computer: Computes the quote fields
            renderer: Object with `async render(url) -> bytes`
            annexes: Preloaded static annex buffers
            base_url: Internal base URL of the template server
            pages: View name -> template file name
            concurrent: Render the three pages as parallel tasks
        """
        self.field_computer = field_computer
        self.renderer = renderer
        self.annexes = annexes
        self.base_url = base_url
        self.pages = dict(pages)
        self.concurrent = concurrent
        self.assembler = DocumentAssembler()

    @classmethod
    def from_settings(cls, settings) -> "QuotePipeline":
        """Wire the pipeline from service settings."""
        config, _, warnings = load_config(settings.FINANCIAL_CONFIG_PATH)
        for warning in warnings:
            logger.warning("Financial config: %s", warning)

        reader = StaticAssetReader(settings.TEMPLATES_DIR)
        annexes = AnnexLibrary(reader, {
            ANNEXES_AFTER_EQUIPOS: settings.ANNEXES_AFTER_EQUIPOS,
            ANNEXES_AFTER_FINANCIERO: settings.ANNEXES_AFTER_FINANCIERO,
        })
        renderer = PageRenderer(settings.RENDER_TIMEOUT_SECONDS, settings.CHROME_EXECUTABLE)

        return cls(
            FieldComputer(config), renderer, annexes, settings.internal_base,
            {
                PORTADA: settings.PAGE_PORTADA,
                EQUIPOS: settings.PAGE_EQUIPOS,
                FINANCIERO: settings.PAGE_FINANCIERO,
            },
            concurrent=settings.RENDER_CONCURRENTLY,
        )

    def build_urls(self, fields: Mapping[str, str]) -> Dict[str, str]:
        views = build_render_views(fields)
        return {
            name: build_page_url(self.base_url, self.pages[name], params)
            for name, params in views.items()
        }

    async def render_pages(self, urls: Mapping[str, str]) -> StageResult:
        """
        Render every page; value is a name -> PDF bytes mapping.

        On the first failure the other renders are cancelled and awaited, so
        no render is still running when the failure is returned.
        """
        names = list(urls)
        try:
            if self.concurrent:
                tasks = [asyncio.ensure_future(self.renderer.render(urls[name])) for name in names]
                try:
                    buffers = await asyncio.gather(*tasks)
                except BaseException:
                    for task in tasks:
                        task.cancel()
                    # wait for every render to release its browser
                    await asyncio.gather(*tasks, return_exceptions=True)
                    raise
            else:
                buffers = [await self.renderer.render(urls[name]) for name in names]
        except RenderError as exc:
            return StageResult.failed(ErrorKind.RENDER, 'render', str(exc))

        return StageResult.success(dict(zip(names, buffers)))

    def ordered_buffers(self, rendered: Mapping[str, bytes]) -> List[Optional[bytes]]:
        """Fixed document order: portada, equipos, annexes, financiero, annexes."""
        return [
            rendered[PORTADA],
            rendered[EQUIPOS],
            *self.annexes.get(ANNEXES_AFTER_EQUIPOS),
            rendered[FINANCIERO],
            *self.annexes.get(ANNEXES_AFTER_FINANCIERO),
        ]

    def assemble(self, buffers: Sequence[Optional[bytes]]) -> StageResult:
        try:
            return StageResult.success(self.assembler.merge(buffers))
        except MergeError as exc:
            return StageResult.failed(ErrorKind.MERGE, 'merge', str(exc))

    async def run(self, raw: Mapping[str, Any]) -> StageResult:
        """
        Produce the quote PDF.

        Args:
            raw: Request data (partial quote fields)

        Returns:
            StageResult with the merged PDF bytes, or the first failure
        """
        fields = self.field_computer.compute_fields(raw)
        urls = self.build_urls(fields)
        logger.info("Rendering URLs: %s", " ".join(urls.values()))

        rendered = await self.render_pages(urls)
        if not rendered.ok:
            return rendered

        return self.assemble(self.ordered_buffers(rendered.value))

"""QR code rendering for share links (reportlab's built-in QR widget)."""
import asyncio
import logging
from typing import Optional

from reportlab.graphics import renderSVG
from reportlab.graphics.barcode.qr import QrCodeWidget
from reportlab.graphics.shapes import Drawing

from flavorchart.infra.latest_only import LatestOnly
from flavorchart.utilities.config import MAX_QR_URL_LENGTH

logger = logging.getLogger(__name__)


def fits_in_qr(link: str, limit: int = MAX_QR_URL_LENGTH) -> bool:
    return 0 < len(link) <= limit


def qr_drawing(value: str, size: float = 120) -> Drawing:
    """Square drawing of `size` points containing the QR code for `value`."""
    widget = QrCodeWidget(value)
    x1, y1, x2, y2 = widget.getBounds()
    width, height = x2 - x1, y2 - y1
    drawing = Drawing(size, size, transform=[size / width, 0, 0, size / height, 0, 0])
    drawing.add(widget)
    return drawing


def render_qr_svg(value: str, size: float = 240) -> str:
    return renderSVG.drawToString(qr_drawing(value, size))


class ShareQrRenderer:
    """Renders share-link QR codes off the event loop; a newer request supersedes older ones."""

    def __init__(self, limit: int = MAX_QR_URL_LENGTH):
        self.limit = limit
        self._latest = LatestOnly()

    async def render(self, link: str, size: float = 240) -> Optional[str]:
        """SVG text for `link`, or None if the link is too long or a newer render started."""
        ticket = self._latest.begin()
        if not fits_in_qr(link, self.limit):
            logger.info(f"Share link too long for a QR code ({len(link)} > {self.limit})")
            return None
        svg = await asyncio.to_thread(render_qr_svg, link, size)
        if not self._latest.is_current(ticket):
            return None
        return svg


__all__ = ['fits_in_qr', 'qr_drawing', 'render_qr_svg', 'ShareQrRenderer']

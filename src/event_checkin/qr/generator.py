from __future__ import annotations

import base64
import io

import qrcode
from qrcode.image.pil import PilImage

_ERROR_CORRECTION = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


class QRCodeGenerator:
    """Renders text as a black-on-white PNG QR code embedded in a data URL."""

    def __init__(self, *, size: int = 256, border: int = 1, error_correction: str = "M"):
        if error_correction not in _ERROR_CORRECTION:
            raise ValueError(f"Unknown error correction level: {error_correction!r}")
        self._size = int(size)
        self._border = int(border)
        self._error_correction = _ERROR_CORRECTION[error_correction]

    def render_png(self, data: str) -> bytes:
        qr = qrcode.QRCode(
            version=None,
            error_correction=self._error_correction,
            box_size=1,
            border=self._border,
        )
        qr.add_data(data)
        qr.make(fit=True)
        # Pick the largest whole-pixel module size that fits the target width.
        qr.box_size = max(1, self._size // (qr.modules_count + 2 * self._border))

        img = qr.make_image(image_factory=PilImage, fill_color="black", back_color="white")
        buf = io.BytesIO()
        img.save(buf, format="PNG")
        return buf.getvalue()

    def to_data_url(self, data: str) -> str:
        encoded = base64.b64encode(self.render_png(data)).decode("ascii")
        return f"data:image/png;base64,{encoded}"

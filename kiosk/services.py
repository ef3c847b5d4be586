import base64
import binascii
import logging
from io import BytesIO
from urllib.parse import urlencode

from django.urls import reverse
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger('kiosk')

CARRIERS_PER_PAGE = 8
ORDERS_PER_PAGE = 6


def kiosk_url(name, **params):
    """Reverse a kiosk URL and append the non-empty query parameters."""
    url = reverse(f'kiosk:{name}')
    query = {key: value for key, value in params.items() if value not in (None, '')}
    if query:
        url = f"{url}?{urlencode(query)}"
    return url


def parse_positive_int(value):
    """Positive integer from a query/form value, or None."""
    if value is None:
        return None
    value = str(value).strip()
    if not value.isdigit() or int(value) <= 0:
        return None
    return int(value)


def decode_signature(signature_data: str) -> Image.Image:
    """
    Decode a signature pad data URL (data:image/png;base64,...) to an image.

    Transparent pixels are flattened onto white so an untouched pad reads
    as blank whatever background the canvas used.
    """
    if ',' in signature_data:
        signature_data = signature_data.split(',', 1)[1]
    sig_image = Image.open(BytesIO(base64.b64decode(signature_data, validate=True)))
    sig_image.load()

    if sig_image.mode in ('RGBA', 'LA', 'P'):
        if sig_image.mode != 'RGBA':
            sig_image = sig_image.convert('RGBA')
        background = Image.new('RGB', sig_image.size, (255, 255, 255))
        background.paste(sig_image, mask=sig_image.split()[-1])
        sig_image = background

    return sig_image


def signature_has_strokes(signature_data) -> bool:
    """True when the data URL holds an image with at least one non-white pixel."""
    if not signature_data or not isinstance(signature_data, str):
        return False
    try:
        sig_image = decode_signature(signature_data)
    except (binascii.Error, ValueError, UnidentifiedImageError, OSError) as e:
        logger.warning(f"Unreadable signature payload: {str(e)}")
        return False

    inverted = ImageOps.invert(sig_image.convert('L'))
    return inverted.getbbox() is not None

"""
PIL IO module.

Conversions between Pillow images, float arrays and data URLs.
"""
import base64
import io
import logging

import numpy as np
from PIL import Image

from reflection_tools.constants import EXPORT_FORMAT

logger = logging.getLogger(__name__)


def post_process(image):
    """Convert a decoded image to sRGB RGBA."""
    icc_profile = image.info.get('icc_profile')
    if image.mode in ('I', 'I;16', 'I;16B', 'I;16L'):
        image = image.point(lambda x: x * (1. / 256.)).convert('L')
    elif image.mode == 'F':
        image = image.point(lambda x: x * 255.).convert('L')
    elif image.mode == 'CMYK':
        image = image.convert('RGB')

    if icc_profile:
        image = _apply_icc(image, icc_profile)

    if image.mode != 'RGBA':
        logger.debug('Converting %s image to RGBA' % image.mode)
        image = image.convert('RGBA')
    return image


def to_arrays(image):
    """Split an RGBA image into float32 color (H, W, 3) and alpha (H, W, 1)."""
    assert image.mode == 'RGBA', 'Expected RGBA image: %s' % image.mode
    pixels = np.asarray(image, dtype=np.float32) / 255.
    return pixels[:, :, :3], pixels[:, :, 3:]


def from_arrays(color, alpha):
    """Merge float color and alpha arrays into an RGBA image."""
    pixels = np.concatenate((color, alpha), axis=2)
    pixels = np.round(255. * np.clip(pixels, 0., 1.)).astype(np.uint8)
    return Image.fromarray(pixels)


def get_mime_type(format):
    """MIME type of a Pillow save format."""
    Image.init()
    mime = Image.MIME.get(format.upper())
    if mime is None:
        raise ValueError('Unsupported export format: %s' % format)
    return mime


def to_data_url(image, format=EXPORT_FORMAT):
    """Serialize an image to a self-contained data URL."""
    buffer = io.BytesIO()
    image.save(buffer, format=format)
    encoded = base64.b64encode(buffer.getvalue()).decode('ascii')
    return 'data:%s;base64,%s' % (get_mime_type(format), encoded)


def from_data_url(url):
    """Decode the payload of a base64 data URL."""
    header, _, data = url.partition(',')
    if not header.startswith('data:') or not header.endswith(';base64'):
        raise ValueError('Not a base64 data URL: %s' % header[:32])
    return base64.b64decode(data)


def _apply_icc(image, icc_profile):
    """Apply ICC Color profile."""
    try:
        from PIL import ImageCms
    except ImportError:
        logger.debug(
            'ICC profile found but not supported. Install little-cms.'
        )
        return image

    if image.mode not in ('RGB', 'RGBA'):
        logger.debug('%s ICC profile is not supported.' % image.mode)
        return image

    try:
        in_profile = ImageCms.ImageCmsProfile(io.BytesIO(icc_profile))
        out_profile = ImageCms.createProfile('sRGB')
        return ImageCms.profileToProfile(
            image, in_profile, out_profile, outputMode=image.mode
        )
    except ImageCms.PyCMSError as e:
        logger.warning('PyCMSError: %s' % (e))

    return image

"""
Image processing (Pillow)
Metadata, thumbnails and re-encoding of uploaded images
"""
import logging
import os

from PIL import Image, ImageOps, UnidentifiedImageError

from dominica_news.exceptions import ValidationFailure, UpstreamFailure

logger = logging.getLogger(__name__)

# Pillow format name -> save options for re-encoding
_FORMAT_OPTIONS = {
    'JPEG': lambda q: {'format': 'JPEG', 'quality': q, 'progressive': True, 'optimize': True},
    'PNG': lambda q: {'format': 'PNG', 'optimize': True},
    'WEBP': lambda q: {'format': 'WEBP', 'quality': q},
}


def _to_rgb(image):
    """Flatten alpha onto white so the result can be written as JPEG"""
    if image.mode in ('RGBA', 'LA', 'P'):
        image = image.convert('RGBA')
        background = Image.new('RGB', image.size, (255, 255, 255))
        background.paste(image, mask=image.split()[-1])
        return background
    if image.mode != 'RGB':
        return image.convert('RGB')
    return image


def verify_image(path):
    """Reject files Pillow cannot decode"""
    try:
        with Image.open(path) as image:
            image.verify()
    except (UnidentifiedImageError, OSError, SyntaxError):
        raise ValidationFailure('Uploaded file is not a valid image')


def get_image_metadata(path):
    try:
        with Image.open(path) as image:
            return {
                'width': image.width,
                'height': image.height,
                'format': (image.format or 'unknown').lower(),
                'size': os.path.getsize(path),
            }
    except (UnidentifiedImageError, OSError) as e:
        raise UpstreamFailure(f'Failed to get image metadata: {e}')


def generate_thumbnail(input_path, output_path, size=(300, 300), quality=80):
    """Center-cropped JPEG thumbnail of exactly ``size``"""
    try:
        with Image.open(input_path) as image:
            image = ImageOps.exif_transpose(image)
            thumb = ImageOps.fit(_to_rgb(image), size, method=Image.Resampling.LANCZOS,
                                 centering=(0.5, 0.5))
            thumb.save(output_path, format='JPEG', quality=quality)
    except (UnidentifiedImageError, OSError) as e:
        raise UpstreamFailure(f'Failed to generate thumbnail: {e}')


def optimize_image(input_path, output_path, quality=85):
    """Re-encode in the source format; anything else becomes JPEG"""
    try:
        with Image.open(input_path) as image:
            fmt = image.format if image.format in _FORMAT_OPTIONS else 'JPEG'
            image = ImageOps.exif_transpose(image)
            if fmt == 'JPEG':
                image = _to_rgb(image)
            image.save(output_path, **_FORMAT_OPTIONS[fmt](quality))
    except (UnidentifiedImageError, OSError) as e:
        raise UpstreamFailure(f'Failed to optimize image: {e}')


def thumbnails_dir(upload_folder):
    return os.path.join(upload_folder, 'thumbnails')


def ensure_thumbnails_directory(upload_folder):
    os.makedirs(thumbnails_dir(upload_folder), exist_ok=True)


def delete_image_files(upload_folder, filename):
    """
    Remove an image and its thumbnail.
    Missing files are fine; other failures are logged and reported back as
    the list of paths that could not be removed.
    """
    failed = []
    for path in (os.path.join(upload_folder, filename),
                 os.path.join(thumbnails_dir(upload_folder), f'thumb-{filename}')):
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error('Failed to delete image file %s: %s', path, e)
            failed.append(path)
    return failed

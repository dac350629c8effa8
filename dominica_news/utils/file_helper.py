import os
import random
import time
from werkzeug.utils import secure_filename
from flask import current_app

from dominica_news.exceptions import ValidationFailure

ALLOWED_EXTENSIONS = {'jpg', 'jpeg', 'png', 'webp'}


def get_file_extension(filename):
    """Extension from a filename, lowercased, without the dot"""
    if not filename or '.' not in filename:
        return None
    return filename.rsplit('.', 1)[1].lower()


def allowed_image(filename, mimetype):
    """Check both the extension and the declared MIME type"""
    return (get_file_extension(filename) in ALLOWED_EXTENSIONS
            and mimetype in current_app.config['ALLOWED_IMAGE_TYPES'])


def unique_image_name(original_filename):
    """image-<unix ms>-<9 random digits>.<ext>"""
    ext = get_file_extension(original_filename)
    suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9 - 1):09d}"
    return f"image-{suffix}.{ext}"


def is_safe_filename(filename):
    """Reject anything that could walk out of the upload folder"""
    return bool(filename) and '..' not in filename and '/' not in filename and '\\' not in filename


def save_image_upload(file):
    """
    Save an uploaded image under UPLOAD_FOLDER
    Returns: (original_name, saved_filename, save_path, file_size, mimetype)
    """
    if not file or not file.filename or not file.filename.strip():
        raise ValidationFailure('No image file provided')

    original_filename = file.filename
    mimetype = (file.mimetype or '').lower()
    if not allowed_image(original_filename, mimetype):
        current_app.logger.warning(f'save_image_upload: rejected {original_filename} ({mimetype})')
        raise ValidationFailure('Only JPEG, PNG, and WebP images are allowed')

    # secure_filename may drop non-ASCII characters entirely
    display_name = secure_filename(original_filename) or f"image.{get_file_extension(original_filename)}"

    upload_folder = current_app.config['UPLOAD_FOLDER']
    os.makedirs(upload_folder, exist_ok=True)

    saved_name = unique_image_name(original_filename)
    save_path = os.path.join(upload_folder, saved_name)
    file.save(save_path)

    file_size = os.path.getsize(save_path)
    max_size = current_app.config['MAX_FILE_SIZE']
    if file_size == 0 or file_size > max_size:
        os.remove(save_path)
        if file_size == 0:
            raise ValidationFailure('Uploaded file is empty')
        raise ValidationFailure(f'Image size must be less than {max_size // (1024 * 1024)}MB')

    current_app.logger.info(f'save_image_upload: saved {saved_name} ({format_size(file_size)})')
    return display_name, saved_name, save_path, file_size, mimetype


def format_size(size):
    """Bytes to a human readable string (KB, MB)"""
    power = 2**10
    n = 0
    power_labels = {0: '', 1: 'K', 2: 'M', 3: 'G', 4: 'T'}
    while size > power:
        size /= power
        n += 1
    return f"{size:.1f} {power_labels[n]}B"

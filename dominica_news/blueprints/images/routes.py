from flask import current_app, send_from_directory

from dominica_news.blueprints.images import images_bp
from dominica_news.exceptions import ValidationFailure
from dominica_news.utils.file_helper import is_safe_filename
from dominica_news.utils.image_processor import thumbnails_dir

# Stored names are unique per upload, so files never change
ONE_YEAR = 365 * 24 * 60 * 60


def _serve(directory, filename):
    if not is_safe_filename(filename):
        raise ValidationFailure('Invalid filename')
    response = send_from_directory(directory, filename, max_age=ONE_YEAR)
    response.headers['Cache-Control'] = f'public, max-age={ONE_YEAR}, immutable'
    return response


@images_bp.route('/<path:filename>')
def serve_image(filename):
    return _serve(current_app.config['UPLOAD_FOLDER'], filename)


@images_bp.route('/thumbnails/<path:filename>')
def serve_thumbnail(filename):
    return _serve(thumbnails_dir(current_app.config['UPLOAD_FOLDER']), filename)

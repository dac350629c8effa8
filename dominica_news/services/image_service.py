import logging
import os

from flask import current_app

from dominica_news.extensions import db
from dominica_news.exceptions import NotFound, NewsException, UpstreamFailure
from dominica_news.models.content import Image
from dominica_news.utils.file_helper import save_image_upload
from dominica_news.utils.image_processor import (
    verify_image,
    get_image_metadata,
    generate_thumbnail,
    optimize_image,
    delete_image_files,
    ensure_thumbnails_directory,
    thumbnails_dir,
)

logger = logging.getLogger(__name__)


class ImageService:
    @staticmethod
    def upload(file_storage, uploader):
        """
        Save, verify, thumbnail and re-encode an upload, then record it.
        Any failure after the file hits the disk removes what was written.
        """
        config = current_app.config
        upload_folder = config['UPLOAD_FOLDER']
        original_name, filename, path, file_size, mimetype = save_image_upload(file_storage)

        try:
            # 1. Make sure it really is an image
            verify_image(path)
            ensure_thumbnails_directory(upload_folder)

            # 2. Dimensions
            metadata = get_image_metadata(path)

            # 3. Thumbnail
            generate_thumbnail(
                path,
                os.path.join(thumbnails_dir(upload_folder), f'thumb-{filename}'),
                size=config['THUMBNAIL_SIZE'],
                quality=config['THUMBNAIL_QUALITY'],
            )

            # 4. Replace the original with the re-encoded version
            optimized_path = os.path.join(upload_folder, f'optimized-{filename}')
            optimize_image(path, optimized_path, quality=config['OPTIMIZE_QUALITY'])
            os.replace(optimized_path, path)

            # 5. Record
            image = Image(
                filename=filename,
                original_name=original_name,
                file_path=path,
                file_size=file_size,
                mime_type=mimetype,
                width=metadata['width'] or None,
                height=metadata['height'] or None,
                uploader=uploader,
            )
            db.session.add(image)
            db.session.commit()
        except Exception as e:
            db.session.rollback()
            delete_image_files(upload_folder, filename)
            leftover = os.path.join(upload_folder, f'optimized-{filename}')
            if os.path.exists(leftover):
                os.remove(leftover)
            if isinstance(e, NewsException):
                raise
            logger.exception('Image upload failed for %s', filename)
            raise UpstreamFailure('Failed to process image')

        logger.info('Image uploaded: %s (%dx%d)', filename, image.width or 0, image.height or 0)
        return image

    @staticmethod
    def list_images(page, limit):
        return Image.query.order_by(Image.created_at.desc()).paginate(
            page=page, per_page=limit, error_out=False
        )

    @staticmethod
    def get(image_id):
        image = db.session.get(Image, image_id)
        if image is None:
            raise NotFound('Image not found')
        return image

    @staticmethod
    def delete(image_id):
        """
        Delete the record first, then the files.
        File removal is best effort: failures are logged and left for
        ``flask prune-images`` instead of failing the request.
        """
        image = ImageService.get(image_id)
        filename = image.filename
        db.session.delete(image)
        db.session.commit()

        failed = delete_image_files(current_app.config['UPLOAD_FOLDER'], filename)
        if failed:
            logger.warning('Image %s deleted but %d file(s) remain: %s', filename, len(failed), failed)
        logger.info('Image deleted: %s', filename)

    @staticmethod
    def find_orphans():
        """
        (orphan_files, dangling_records): files on disk with no row, and rows
        whose main file is gone.
        """
        upload_folder = current_app.config['UPLOAD_FOLDER']
        known = {image.filename: image for image in Image.query.all()}

        orphan_files = []
        if os.path.isdir(upload_folder):
            for name in os.listdir(upload_folder):
                if os.path.isfile(os.path.join(upload_folder, name)) and name not in known:
                    orphan_files.append(name)
        thumbs = thumbnails_dir(upload_folder)
        if os.path.isdir(thumbs):
            for name in os.listdir(thumbs):
                if name.startswith('thumb-') and name[len('thumb-'):] not in known:
                    orphan_files.append(os.path.join('thumbnails', name))

        dangling = [image for name, image in known.items()
                    if not os.path.exists(os.path.join(upload_folder, name))]
        return sorted(orphan_files), dangling

    @staticmethod
    def prune_orphans(dry_run=False):
        """Remove orphan files and dangling rows; returns (files, rows) counts"""
        upload_folder = current_app.config['UPLOAD_FOLDER']
        orphan_files, dangling = ImageService.find_orphans()
        if dry_run:
            return len(orphan_files), len(dangling)

        removed_files = 0
        for relative in orphan_files:
            try:
                os.remove(os.path.join(upload_folder, relative))
                removed_files += 1
            except OSError as e:
                logger.error('Could not remove orphan file %s: %s', relative, e)

        for image in dangling:
            delete_image_files(upload_folder, image.filename)
            db.session.delete(image)
        db.session.commit()
        return removed_files, len(dangling)

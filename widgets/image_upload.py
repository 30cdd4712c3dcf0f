"""Image picker state for the story and verse forms."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

MAX_IMAGE_BYTES = 50 * 1024 * 1024

INVALID_TYPE_MESSAGE = 'Please select a valid image file'
TOO_LARGE_MESSAGE = 'Image file must be less than 50MB'


def validate_image_upload(content_type: Optional[str], size: Optional[int]) -> Optional[str]:
    """Return the user-facing rejection message, or None when the file is acceptable."""
    if not content_type or not content_type.lower().startswith('image/'):
        return INVALID_TYPE_MESSAGE
    if size is not None and size > MAX_IMAGE_BYTES:
        return TOO_LARGE_MESSAGE
    return None


@dataclass
class SelectedImage:
    filename: str
    content_type: str
    size: int


class ImageUploadWidget:
    def __init__(self, preview: Optional[str] = None):
        self.preview = preview
        self.file: Optional[SelectedImage] = None
        self.error: Optional[str] = None
        self.input_value = ''

    def select(self, filename: str, content_type: str, size: int, preview: Optional[str] = None) -> bool:
        message = validate_image_upload(content_type, size)
        # the input is always cleared so the same file can be picked again
        self.input_value = ''
        if message:
            self.error = message
            return False

        self.error = None
        self.file = SelectedImage(filename, content_type, size)
        self.preview = preview
        return True

    def remove(self):
        self.preview = None
        self.file = None
        self.input_value = ''

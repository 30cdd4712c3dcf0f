from widgets.collaboration_badge import Badge, collaboration_badge
from widgets.image_upload import ImageUploadWidget, validate_image_upload
from widgets.install_prompt import InstallPrompt
from widgets.tag_input import TagInput
from widgets.verse_pager import VersePager

__all__ = [
    'Badge',
    'ImageUploadWidget',
    'InstallPrompt',
    'TagInput',
    'VersePager',
    'collaboration_badge',
    'validate_image_upload',
]

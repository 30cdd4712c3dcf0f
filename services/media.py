"""Image source shapes and URL helpers for stories, verses and moments."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from config import DEFAULT_SITE_URL

_PASSTHROUGH_SCHEMES = ('http://', 'https://', 'blob:', 'data:')


@dataclass(frozen=True)
class DirectUrl:
    url: str


@dataclass(frozen=True)
class PreviewBlob:
    preview: str


@dataclass(frozen=True)
class NestedImage:
    source: 'ImageSource'


@dataclass(frozen=True)
class MomentsList:
    first: 'ImageSource'


@dataclass(frozen=True)
class PublicId:
    public_id: str


@dataclass(frozen=True)
class LocalFile:
    path: str


ImageSource = Union[DirectUrl, PreviewBlob, NestedImage, MomentsList, PublicId, LocalFile]


def _text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _classify_nested(image: Any) -> Optional[ImageSource]:
    if _text(image):
        return DirectUrl(image)
    if not isinstance(image, dict):
        return None
    if _text(image.get('file_url')):
        return DirectUrl(image['file_url'])
    if _text(image.get('url')):
        return DirectUrl(image['url'])
    if _text(image.get('preview')):
        return PreviewBlob(image['preview'])
    return None


def classify_image_source(value: Any) -> Optional[ImageSource]:
    """Work out which of the known upload/API shapes ``value`` is."""
    if not value:
        return None
    if isinstance(value, str):
        return DirectUrl(value)
    if not isinstance(value, dict):
        return None

    if _text(value.get('preview')):
        return PreviewBlob(value['preview'])
    if _text(value.get('file_url')):
        return DirectUrl(value['file_url'])
    if _text(value.get('url')):
        return DirectUrl(value['url'])
    if value.get('image'):
        nested = _classify_nested(value['image'])
        if nested is not None:
            return NestedImage(nested)
    moments = value.get('moments')
    if isinstance(moments, list) and moments:
        first = classify_image_source(moments[0])
        if first is not None:
            return MomentsList(first)
    if _text(value.get('public_id')):
        return PublicId(value['public_id'])
    local = value.get('file')
    if isinstance(local, dict) and _text(local.get('path')):
        return LocalFile(local['path'])
    return None


def source_to_src(source: ImageSource) -> str:
    if isinstance(source, DirectUrl):
        return source.url
    if isinstance(source, PreviewBlob):
        return source.preview
    if isinstance(source, NestedImage):
        return source_to_src(source.source)
    if isinstance(source, MomentsList):
        return source_to_src(source.first)
    if isinstance(source, PublicId):
        return source.public_id
    if isinstance(source, LocalFile):
        return source.path
    raise TypeError(f'Unknown image source: {source!r}')


def resolve_image_src(value: Any) -> Optional[str]:
    source = classify_image_source(value)
    return source_to_src(source) if source is not None else None


def absolute_url(path: Optional[str], base_url: Optional[str]) -> str:
    """Prefix backend-relative media paths with the API origin."""
    if not path:
        return ''
    if path.startswith(_PASSTHROUGH_SCHEMES) or not base_url:
        return path
    return f"{base_url.rstrip('/')}{path if path.startswith('/') else '/' + path}"


def site_url(path: Optional[str] = '/', base_url: Optional[str] = None) -> str:
    base = (base_url or DEFAULT_SITE_URL).rstrip('/')
    path = path or '/'
    return f"{base}{path if path.startswith('/') else '/' + path}"


def _first_image_url(images: list, base_url: Optional[str]) -> Optional[str]:
    im = images[0]
    if not im:
        return None
    if isinstance(im, str):
        return absolute_url(im, base_url)
    if isinstance(im, dict):
        return absolute_url(im.get('file_url') or im.get('url'), base_url) or None
    return None


def get_moment_image_url(moment: Any, base_url: Optional[str]) -> Optional[str]:
    """Best image URL for a verse moment as returned by the backend."""
    if not moment:
        return None
    if isinstance(moment, str):
        return absolute_url(moment, base_url)
    if not isinstance(moment, dict):
        return None

    image = moment.get('image')
    if image:
        if isinstance(image, str):
            return absolute_url(image, base_url)
        if isinstance(image, list):
            return _first_image_url(image, base_url)
        if isinstance(image, dict):
            if image.get('file_url'):
                return absolute_url(image['file_url'], base_url)
            if image.get('url'):
                return absolute_url(image['url'], base_url)
            file = image.get('file')
            if isinstance(file, str) and file:
                return absolute_url(file, base_url)
            if isinstance(file, dict) and file.get('url'):
                return absolute_url(file['url'], base_url)

    if moment.get('file_url'):
        return absolute_url(moment['file_url'], base_url)
    if moment.get('url'):
        return absolute_url(moment['url'], base_url)
    images = moment.get('images')
    if isinstance(images, list) and images:
        return _first_image_url(images, base_url)
    return None

from django.conf import settings
from django.core.files.base import ContentFile
from django.core.files.storage import FileSystemStorage


def artifact_storage(location=None) -> FileSystemStorage:
    return FileSystemStorage(location=location or settings.ARTIFACT_DIR)


def save_bytes(data: bytes, name: str, location=None) -> str:
    """
    Write raw bytes under the artifact directory (created on first write)
    and return the absolute filesystem path.
    """
    storage = artifact_storage(location)
    saved_name = storage.save(name, ContentFile(data))
    return storage.path(saved_name)

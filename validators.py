import re
from typing import Optional

from errors import ValidationError
from models import PHOTO_TYPES

MAX_PHOTO_NAME_LENGTH = 50
MAX_FOLDER_NAME_LENGTH = 100
MAX_COLLAGE_TITLE_LENGTH = 50

PHOTO_NAME_PATTERN = re.compile(r"[A-Za-z0-9 _-]{1,50}")
FOLDER_NAME_PATTERN = re.compile(r"[A-Za-z0-9 /-]{1,100}")
DATETIME_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)


# ── Predicates ────────────────────────────────────────────────────────────────

def is_valid_photo_name(name: Optional[str]) -> bool:
    return bool(name) and PHOTO_NAME_PATTERN.fullmatch(name) is not None


def is_valid_folder_name(folder: Optional[str]) -> bool:
    return bool(folder) and FOLDER_NAME_PATTERN.fullmatch(folder) is not None


def is_valid_photo_type(photo_type: Optional[str]) -> bool:
    return bool(photo_type) and photo_type.lower() in PHOTO_TYPES


def is_valid_datetime(value: Optional[str]) -> bool:
    return bool(value) and DATETIME_PATTERN.fullmatch(value) is not None


# ── Checks raising ValidationError ────────────────────────────────────────────

def check_photo_name(name: Optional[str]) -> str:
    if not name:
        raise ValidationError("Photo name cannot be empty.")
    if len(name) > MAX_PHOTO_NAME_LENGTH:
        raise ValidationError(
            f"Photo name cannot exceed {MAX_PHOTO_NAME_LENGTH} characters."
        )
    if not is_valid_photo_name(name):
        raise ValidationError(
            "Photo name can only contain letters, numbers, spaces, "
            "underscores, and hyphens."
        )
    return name


def check_folder_name(folder: Optional[str]) -> str:
    if not folder:
        raise ValidationError("Folder name cannot be empty.")
    if len(folder) > MAX_FOLDER_NAME_LENGTH:
        raise ValidationError(
            f"Folder name cannot exceed {MAX_FOLDER_NAME_LENGTH} characters."
        )
    if not is_valid_folder_name(folder):
        raise ValidationError(
            "Folder name can only contain letters, numbers, spaces, "
            "hyphens, and forward slashes."
        )
    return folder


def check_photo_type(photo_type: Optional[str]) -> str:
    """Return the lowercase type, or raise."""
    if not photo_type:
        raise ValidationError("Photo type cannot be empty.")
    if not is_valid_photo_type(photo_type):
        raise ValidationError("Only 'png' and 'jpg' types are allowed.")
    return photo_type.lower()


def check_datetime(value: Optional[str]) -> str:
    if not is_valid_datetime(value):
        raise ValidationError(
            f"Invalid date format {value!r}. Should be YYYY-MM-DD HH:MM:SS."
        )
    return value


def check_collage_title(title: Optional[str]) -> str:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Collage title cannot be empty.")
    if len(title) > MAX_COLLAGE_TITLE_LENGTH:
        raise ValidationError(
            f"Collage title cannot exceed {MAX_COLLAGE_TITLE_LENGTH} characters."
        )
    return title

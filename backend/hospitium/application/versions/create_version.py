# hospitium/application/versions/create_version.py
from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from hospitium.extensions import db
from hospitium.models.manuscript import Manuscript
from hospitium.models.manuscript_version import ManuscriptVersion, VERSION_TYPES
from hospitium.domain.exceptions import Conflict, ValidationError
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.versioning import next_version_number, serialize_changes, word_count
from hospitium.utils.activity import log_action
from hospitium.utils.validation import string_field


def snapshot_version(
    manuscript: Manuscript,
    *,
    actor_id: str,
    title: str,
    content: str,
    version_type: str,
    description: str | None = None,
    changes: Any = None,
) -> ManuscriptVersion:
    """
    Add the next numbered snapshot of ``manuscript`` to the session.

    The caller must hold the manuscript row lock inside the current
    transaction so the max + 1 read and the insert cannot interleave.
    """
    version = ManuscriptVersion()
    version.manuscript_id = manuscript.id
    version.version_number = next_version_number(manuscript.id)
    version.title = title
    version.content = content
    version.changes = serialize_changes(changes)
    version.created_by = actor_id
    version.version_type = version_type
    version.description = description
    version.word_count = word_count(content)

    db.session.add(version)
    db.session.flush()
    return version


def create_version(
    *,
    manuscript_id: str,
    actor_id: str,
    data: Dict[str, Any],
) -> ManuscriptVersion:
    """
    Create an immutable version snapshot of a manuscript.

    Title and content default to the live manuscript when not supplied.
    """
    try:
        with transactional():
            manuscript = get_accessible_manuscript(
                user_id=actor_id,
                manuscript_id=manuscript_id,
                permission=Permission.EDIT,
                lock=True,
            )

            version_type = string_field(data, "versionType") or "MANUAL"
            if version_type not in VERSION_TYPES:
                raise ValidationError("versionType must be either MANUAL or AUTO")

            title = string_field(data, "title") or manuscript.title
            content = string_field(data, "content")
            if content is None:
                content = manuscript.content or ""

            version = snapshot_version(
                manuscript,
                actor_id=actor_id,
                title=title,
                content=content,
                version_type=version_type,
                description=string_field(data, "description") or None,
                changes=data.get("changes"),
            )

            log_action(
                action="version.create",
                entity_type="manuscript",
                entity_id=manuscript.id,
                payload={
                    "version": version.version_number,
                    "version_type": version.version_type,
                },
            )

        return version

    except IntegrityError as exc:
        # Unique (manuscript_id, version_number) lost a race
        raise Conflict("Version number already taken, please retry") from exc

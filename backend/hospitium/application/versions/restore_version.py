# hospitium/application/versions/restore_version.py
from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from hospitium.models.base import utc_now
from hospitium.models.manuscript_version import ManuscriptVersion
from hospitium.domain.exceptions import Conflict, NotFound
from hospitium.domain.permissions import Permission, get_accessible_manuscript
from hospitium.utils.transaction import transactional
from hospitium.utils.activity import log_action
from .create_version import snapshot_version


def restore_version(
    *,
    manuscript_id: str,
    version_id: str,
    actor_id: str,
) -> Dict[str, Any]:
    """
    Restore a manuscript to a previous version.

    Responsibilities:
    - Lock the live manuscript row
    - Back up the live state as an AUTO version
    - Overwrite title, content and word count from the target version
    - Audit logging

    The backup and the overwrite commit together or not at all.
    """
    try:
        with transactional():
            # 1️⃣ Live manuscript, row-locked
            manuscript = get_accessible_manuscript(
                user_id=actor_id,
                manuscript_id=manuscript_id,
                permission=Permission.EDIT,
                lock=True,
            )

            # 2️⃣ Target version must belong to this manuscript
            target: ManuscriptVersion | None = (
                ManuscriptVersion.query
                .filter_by(id=version_id, manuscript_id=manuscript.id)
                .first()
            )
            if not target:
                raise NotFound("Version not found")

            # 3️⃣ Backup of the live state (word count from live content)
            backup = snapshot_version(
                manuscript,
                actor_id=actor_id,
                title=manuscript.title,
                content=manuscript.content or "",
                version_type="AUTO",
                description=f"Backup before restoring to version {target.version_number}",
            )

            # 4️⃣ Overwrite the live document
            now = utc_now()
            manuscript.title = target.title
            manuscript.content = target.content
            manuscript.word_count = target.word_count
            manuscript.last_saved = now
            manuscript.updated_at = now

            # 5️⃣ Audit logging
            log_action(
                action="version.restore",
                entity_type="manuscript",
                entity_id=manuscript.id,
                payload={
                    "restored_from": target.version_number,
                    "backup_version": backup.version_number,
                },
            )

    except IntegrityError as exc:
        raise Conflict("Version number already taken, please retry") from exc

    return {
        "manuscript": manuscript,
        "restored_from_version": target.version_number,
        "backup_version": backup.version_number,
    }

from hospitium.utils.versioning import deserialize_changes
from .common import iso
from .user import normalize_user_summary

def normalize_version(version, include_content=False):
    data = {
        "id": version.id,
        "versionNumber": version.version_number,
        "title": version.title,
        "versionType": version.version_type,
        "description": version.description,
        "wordCount": version.word_count,
        "createdAt": iso(version.created_at),
        "creator": normalize_user_summary(version.creator),
    }

    if include_content:
        data["content"] = version.content
        data["changes"] = deserialize_changes(version.changes)

    return data

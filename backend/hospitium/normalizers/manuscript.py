from .common import iso
from .user import normalize_user_summary
from .collaboration import normalize_collaborator

def manuscript_authors(manuscript):
    names = [
        c.user.full_name or c.user.email
        for c in manuscript.collaborators
        if c.user is not None
    ]
    return ", ".join(names) or "Unknown"

def normalize_manuscript_summary(manuscript):
    return {
        "id": manuscript.id,
        "title": manuscript.title,
        "description": manuscript.description,
        "type": manuscript.type,
        "status": manuscript.status,
        "createdAt": iso(manuscript.created_at),
        "updatedAt": iso(manuscript.updated_at),
        "authors": manuscript_authors(manuscript),
        "collaboratorCount": len(manuscript.collaborators),
    }

def normalize_manuscript(manuscript, include_collaborators=False):
    data = {
        "id": manuscript.id,
        "title": manuscript.title,
        "type": manuscript.type,
        "field": manuscript.field,
        "description": manuscript.description,
        "status": manuscript.status,
        "content": manuscript.content or "",
        "wordCount": manuscript.word_count or 0,
        "createdAt": iso(manuscript.created_at),
        "updatedAt": iso(manuscript.updated_at),
        "lastSaved": iso(manuscript.last_saved),
        "creator": normalize_user_summary(manuscript.creator, include_orcid=True),
    }

    if include_collaborators:
        data["collaborators"] = [normalize_collaborator(c) for c in manuscript.collaborators]
        data["collaboratorCount"] = len(manuscript.collaborators)

    return data

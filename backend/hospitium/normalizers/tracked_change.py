from .common import iso
from .user import normalize_user_summary

def normalize_tracked_change(change, include_resolution=True):
    data = {
        "id": change.id,
        "changeId": change.change_id,
        "type": change.type,
        "operation": change.operation,
        "content": change.content,
        "oldContent": change.old_content,
        "startOffset": change.start_offset,
        "endOffset": change.end_offset,
        "nodeType": change.node_type,
        "status": change.status,
        "createdAt": iso(change.created_at),
        "author": normalize_user_summary(change.author),
    }

    if include_resolution:
        data["acceptedAt"] = iso(change.accepted_at)
        data["rejectedAt"] = iso(change.rejected_at)
        data["acceptedBy"] = normalize_user_summary(change.accepted_by_user)

    return data

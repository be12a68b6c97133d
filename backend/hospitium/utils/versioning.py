import json
import re

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


def word_count(content):
    """
    Count words in rich-text content.

    Tags are stripped and whitespace collapsed before counting, so markup
    with no text ("<p></p>") counts as 0.
    """
    if not content:
        return 0

    text = _WHITESPACE_RE.sub(" ", _TAG_RE.sub("", content)).strip()
    return len(text.split(" ")) if text else 0


def next_version_number(manuscript_id):
    from hospitium.models.manuscript_version import ManuscriptVersion

    last = (
        ManuscriptVersion.query
        .filter_by(manuscript_id=manuscript_id)
        .order_by(ManuscriptVersion.version_number.desc())
        .first()
    )
    return (last.version_number + 1) if last else 1


def serialize_changes(changes):
    return json.dumps(changes) if changes is not None else None


def deserialize_changes(raw):
    return json.loads(raw) if raw else None

# hospitium/services/orcid.py
"""
Client for the ORCID public API (https://pub.orcid.org/v3.0).

Lookups are single synchronous requests with no retry: a transport error or
a non-OK search/record response raises :class:`OrcidError` straight away.
"""
from __future__ import annotations

import re
from typing import Any, Dict, List, Optional, Union

import requests
from flask import current_app

ORCID_PROFILE_BASE = "https://orcid.org"
MAX_ROWS = 200

_ORCID_ID_RE = re.compile(r"^\d{4}-\d{4}-\d{4}-\d{3}[\dX]$")
_ORCID_URI_PREFIX_RE = re.compile(r"^https?://(www\.)?orcid\.org/")
_ORCID_IN_TEXT_RE = re.compile(r"(\d{4}-\d{4}-\d{4}-\d{3}[\dX])")

# Structured criteria -> ORCID Solr field
_QUERY_FIELDS = (
    ("givenName", "given-names"),
    ("familyName", "family-name"),
    ("affiliation", "affiliation-org-name"),
    ("orcidId", "orcid"),
    ("email", "email"),
)


class OrcidError(Exception):
    """The ORCID API could not be reached or answered with an error."""


class OrcidNotFound(OrcidError):
    pass


def is_valid_orcid_id(orcid_id: Optional[str]) -> bool:
    if not orcid_id:
        return False
    return bool(_ORCID_ID_RE.match(_ORCID_URI_PREFIX_RE.sub("", orcid_id)))


def format_orcid_id(orcid_id: Optional[str]) -> str:
    """Strip an ``https://orcid.org/`` prefix; unknown shapes pass through."""
    if not orcid_id:
        return ""
    clean = _ORCID_URI_PREFIX_RE.sub("", orcid_id)
    return clean if is_valid_orcid_id(clean) else orcid_id


def extract_orcid_id(text: Optional[str]) -> str:
    if not text:
        return ""
    match = _ORCID_IN_TEXT_RE.search(text)
    return match.group(1) if match else text.strip()


def orcid_profile_url(orcid_id: str) -> str:
    return f"{ORCID_PROFILE_BASE}/{format_orcid_id(orcid_id)}"


def build_structured_query(criteria: Dict[str, Any]) -> str:
    parts = []
    for key, field in _QUERY_FIELDS:
        value = (criteria.get(key) or "").strip()
        if not value:
            continue
        if key == "orcidId":
            value = format_orcid_id(value)
        parts.append(f"{field}:{value}")
    return " AND ".join(parts)


def _display_name(given: str, family: str) -> str:
    return " ".join(p for p in (given, family) if p) or "Unknown"


def transform_search_result(result: Dict[str, Any]) -> Dict[str, Any]:
    orcid_id = (result.get("orcid-identifier") or {}).get("path") or ""
    # expanded-search shape
    given = result.get("given-names") or ""
    family = result.get("family-names") or ""

    if not given and not family:
        name = (result.get("person") or {}).get("name") or {}
        given = (name.get("given-names") or {}).get("value") or ""
        family = (name.get("family-name") or {}).get("value") or ""

    affiliations = list(dict.fromkeys(
        inst for inst in (result.get("institution-name") or []) if inst
    ))

    return {
        "orcidId": format_orcid_id(orcid_id),
        "givenNames": given,
        "familyName": family,
        "displayName": _display_name(given, family),
        "affiliation": affiliations[0] if affiliations else "",
        "affiliations": affiliations,
        "profileUrl": orcid_profile_url(orcid_id),
        "email": None,
    }


def _affiliation_names(section: Optional[Dict[str, Any]], summary_key: str) -> List[str]:
    names = []
    for group in (section or {}).get("affiliation-group") or []:
        for summary in group.get("summaries") or []:
            org = ((summary.get(summary_key) or {}).get("organization") or {}).get("name")
            if org:
                names.append(org)
    return names


def transform_record(record: Dict[str, Any]) -> Dict[str, Any]:
    person = record.get("person") or {}
    name = person.get("name") or {}
    activities = record.get("activities-summary") or {}
    orcid_id = (record.get("orcid-identifier") or {}).get("path") or ""

    given = (name.get("given-names") or {}).get("value") or ""
    family = (name.get("family-name") or {}).get("value") or ""

    affiliations = list(dict.fromkeys(
        _affiliation_names(activities.get("employments"), "employment-summary")
        + _affiliation_names(activities.get("educations"), "education-summary")
    ))

    return {
        "orcidId": format_orcid_id(orcid_id),
        "givenNames": given,
        "familyName": family,
        "creditName": (name.get("credit-name") or {}).get("value") or _display_name(given, family),
        "displayName": _display_name(given, family),
        "biography": (person.get("biography") or {}).get("content") or "",
        "affiliations": affiliations,
        "profileUrl": orcid_profile_url(orcid_id),
        "lastModified": (record.get("last-modified-date") or {}).get("value"),
    }


class OrcidClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        user_agent: str = "Hospitium Research Platform/1.0",
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": user_agent,
        })

    @classmethod
    def from_app(cls) -> "OrcidClient":
        """The current app's client; one pooled session per app."""
        client = current_app.extensions.get("orcid")
        if client is None:
            config = current_app.config
            client = current_app.extensions.setdefault("orcid", cls(
                config["ORCID_API_URL"],
                timeout=config["ORCID_TIMEOUT"],
                user_agent=config["ORCID_USER_AGENT"],
            ))
        return client

    def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise OrcidError(f"ORCID request failed: {exc}") from exc

    def search_researchers(
        self,
        criteria: Union[str, Dict[str, Any]],
        rows: int = 20,
        start: int = 0,
    ) -> Dict[str, Any]:
        """
        Search researchers by free text or structured criteria.

        Queries shorter than two characters return no results without
        calling the API.
        """
        if isinstance(criteria, str):
            query = criteria.strip()
        else:
            query = build_structured_query(criteria)

        rows = max(1, min(int(rows), MAX_ROWS))
        start = max(int(start), 0)

        if len(query) < 2:
            return {"researchers": [], "total": 0, "hasMore": False}

        response = self._get("search", params={"q": query, "rows": rows, "start": start})
        if not response.ok:
            raise OrcidError(f"ORCID API error: {response.status_code} {response.reason}")

        payload = response.json() or {}
        results = payload.get("result") or payload.get("expanded-result") or []
        total = payload.get("num-found") or 0

        return {
            "researchers": [transform_search_result(r) for r in results],
            "total": total,
            "hasMore": start + rows < total,
        }

    def get_researcher_details(self, orcid_id: str) -> Dict[str, Any]:
        if not is_valid_orcid_id(orcid_id):
            raise ValueError("Invalid ORCID iD format")

        response = self._get(f"{format_orcid_id(orcid_id)}/record")
        if response.status_code == 404:
            raise OrcidNotFound("Researcher not found")
        if not response.ok:
            raise OrcidError(f"ORCID API error: {response.status_code} {response.reason}")

        return transform_record(response.json() or {})

    def get_researcher_emails(self, orcid_id: str) -> List[str]:
        """Public emails of a researcher; private or missing lists give []."""
        if not is_valid_orcid_id(orcid_id):
            return []

        response = self._get(f"{format_orcid_id(orcid_id)}/email")
        if not response.ok:
            return []

        payload = response.json() or {}
        return [e["email"] for e in payload.get("email") or [] if e.get("email")]

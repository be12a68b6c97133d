from .common import iso

def normalize_user_summary(user, include_orcid=False):
    if user is None:
        return None

    data = {
        "id": user.id,
        "givenName": user.given_name,
        "familyName": user.family_name,
        "email": user.email,
    }

    if include_orcid:
        data["orcidId"] = user.orcid_id
        data["primaryInstitution"] = user.primary_institution

    return data

def normalize_user(user):
    return {
        **normalize_user_summary(user, include_orcid=True),
        "role": user.role,
        "isActive": user.is_active,
        "createdAt": iso(user.created_at),
    }

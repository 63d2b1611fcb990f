"""Document store collection names and path builders (schema-in-code).

Firestore has no DDL or migrations. Collections are created automatically
when you first write a document. Use these constants so paths stay
consistent and act as the single source of truth for the "schema":

    users/{uid}                                      account document
    projects/{uid}/{projectCollection}/{projectId}   project document
    .../{projectId}/images/{imageId}                 image document
"""

COLLECTION_USERS = "users"
COLLECTION_PROJECTS = "projects"
SUBCOLLECTION_PROJECT = "project"  # collection new uploads write to
SUBCOLLECTION_IMAGES = "images"

# Local identity provider
COLLECTION_CREDENTIALS = "credentials"
COLLECTION_CREDENTIAL_EMAILS = "credential_emails"


def user_path(uid: str) -> str:
    return f"{COLLECTION_USERS}/{uid}"


def projects_root_path(uid: str) -> str:
    """Per-account namespace document whose sub-collections hold projects."""
    return f"{COLLECTION_PROJECTS}/{uid}"


def project_path(uid: str, project_id: str, collection: str = SUBCOLLECTION_PROJECT) -> str:
    return f"{COLLECTION_PROJECTS}/{uid}/{collection}/{project_id}"


def images_path(project_doc_path: str) -> str:
    return f"{project_doc_path}/{SUBCOLLECTION_IMAGES}"

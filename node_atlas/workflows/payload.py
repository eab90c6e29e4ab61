"""Helpers shared by the workflow tools for reading n8n workflow JSON."""
import copy
from datetime import datetime
from typing import Any, Optional

# Fields owned by the instance a workflow lives in
INSTANCE_FIELDS = ("id", "createdAt", "updatedAt", "active", "versionId")


def parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse an n8n ISO timestamp; None for missing or unparseable values."""
    if not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


def last_updated(workflow: dict) -> Optional[datetime]:
    return parse_timestamp(workflow.get("updatedAt") or workflow.get("createdAt"))


def tag_names(workflow: dict) -> list[str]:
    """Tag names of a workflow; the API returns tag objects, older exports plain strings."""
    names = []
    for tag in workflow.get("tags") or []:
        name = tag.get("name") if isinstance(tag, dict) else tag
        if name:
            names.append(str(name))
    return names


def credential_names(workflow: dict) -> list[str]:
    """Distinct credential names referenced by the workflow's nodes."""
    names: list[str] = []
    for node in workflow.get("nodes") or []:
        for cred_type, cred in (node.get("credentials") or {}).items():
            name = cred.get("name") if isinstance(cred, dict) else None
            label = name or cred_type
            if label not in names:
                names.append(label)
    return names


def prepare_payload(workflow: dict, marker_tag: str) -> dict[str, Any]:
    """Copy a workflow for writing into another instance.

    Instance-owned fields are removed and ``marker_tag`` is appended to the
    tags. The input is not modified.
    """
    payload = copy.deepcopy(workflow)
    for field in INSTANCE_FIELDS:
        payload.pop(field, None)

    names = tag_names(workflow)
    if marker_tag not in names:
        names.append(marker_tag)
    payload["tags"] = [{"name": name} for name in names]
    return payload

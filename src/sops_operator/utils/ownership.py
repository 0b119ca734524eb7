"""Controller owner references between a SopsSecret and its Secret."""

from __future__ import annotations

from typing import Any

from ..errors import ConflictError


def build_owner_reference(owner: dict[str, Any]) -> dict[str, Any]:
    """Build a controller owner reference pointing at ``owner``."""
    meta = owner.get("metadata", {})
    return {
        "apiVersion": owner.get("apiVersion"),
        "kind": owner.get("kind"),
        "name": meta.get("name"),
        "uid": meta.get("uid"),
        "controller": True,
        "blockOwnerDeletion": True,
    }


def get_controller_reference(obj: dict[str, Any]) -> dict[str, Any] | None:
    """Return the owner reference flagged as controller, if any."""
    for ref in obj.get("metadata", {}).get("ownerReferences") or []:
        if ref.get("controller"):
            return ref
    return None


def is_controlled_by(obj: dict[str, Any], owner: dict[str, Any]) -> bool:
    """Check whether ``owner`` is the controller of ``obj``.

    References are compared by value: kind and uid must both match.
    """
    ref = get_controller_reference(obj)
    if ref is None:
        return False
    owner_uid = owner.get("metadata", {}).get("uid")
    return bool(owner_uid) and ref.get("uid") == owner_uid and ref.get("kind") == owner.get("kind")


def ensure_controlled_by(obj: dict[str, Any], owner: dict[str, Any]) -> None:
    """Fail closed unless an already stored ``obj`` is controlled by ``owner``.

    Objects that were never stored (no uid yet) pass: they are about to be
    created by this controller.

    Raises:
        ConflictError: If ``obj`` exists and has another controller or none at all
    """
    if not obj.get("metadata", {}).get("uid"):
        return
    if not is_controlled_by(obj, owner):
        raise ConflictError("secret already exists and is not owned by sops-operator")


def set_controller_reference(obj: dict[str, Any], owner: dict[str, Any]) -> None:
    """Make ``owner`` the controller of ``obj``, keeping unrelated owner references."""
    meta = obj.setdefault("metadata", {})
    owner_ref = build_owner_reference(owner)
    refs = list(meta.get("ownerReferences") or [])
    for idx, ref in enumerate(refs):
        if ref.get("uid") == owner_ref["uid"]:
            # Update in place so an unchanged owner does not reorder the list
            refs[idx] = {**ref, **owner_ref}
            break
    else:
        refs.append(owner_ref)
    meta["ownerReferences"] = refs

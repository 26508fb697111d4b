from fastapi import APIRouter, HTTPException, Query, status
from sqlalchemy.exc import IntegrityError

from bulkmod.dependencies import CurrentUser, ModLists
from bulkmod.exceptions import ModListNotFound, PublicModListNotFound
from bulkmod.schemas.base import MessageResponse
from bulkmod.schemas.mod_list import (
    MembershipCheck,
    ModListCreate,
    ModListDetail,
    ModListModCreate,
    ModListModRead,
    ModListModRemove,
    ModListRead,
    ModListSummary,
    ModListUpdate,
    ModListUpdateResponse,
    PublicModListSummary,
)

router = APIRouter(prefix="/modlists", tags=["modlists"])


@router.post("", response_model=ModListDetail, status_code=status.HTTP_201_CREATED)
def create_mod_list(request: ModListCreate, user: CurrentUser, mod_lists: ModLists):
    """Create a new, empty mod list.

    Parameters:
        request: Name, optional description and visibility.
        user: The authenticated user.
        mod_lists: Mod list service bound to the request session.

    Returns:
        The created mod list.
    """
    return mod_lists.create(
        user.id,
        request.name,
        description=request.description,
        is_public=request.is_public,
    )


@router.get("", response_model=list[ModListSummary])
def list_mod_lists(user: CurrentUser, mod_lists: ModLists):
    """List the current user's mod lists, most recently updated first.

    Each list carries a preview of its five newest mods and a total count.
    """
    return mod_lists.list_for_user(user.id)


@router.get("/public", response_model=list[PublicModListSummary])
def list_public_mod_lists(mod_lists: ModLists):
    """List every public mod list with its owner's username."""
    return mod_lists.list_public()


@router.post(
    "/public/{list_id}/copy",
    response_model=ModListDetail,
    status_code=status.HTTP_201_CREATED,
)
def copy_public_mod_list(list_id: int, user: CurrentUser, mod_lists: ModLists):
    """Copy a public mod list into the current user's account.

    Parameters:
        list_id: The public list to copy.
        user: The authenticated user.
        mod_lists: Mod list service bound to the request session.

    Returns:
        The new private copy with all of its mods.

    Raises:
        HTTPException: 404 if the list does not exist or is not public.
    """
    try:
        return mod_lists.copy_public(list_id, user.id)
    except PublicModListNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


@router.get("/mods/containing", response_model=list[ModListRead])
def list_mod_lists_containing(
    user: CurrentUser,
    mod_lists: ModLists,
    mod_slug: str = Query(alias="modSlug"),
):
    """List the current user's mod lists that include a given mod."""
    return mod_lists.list_containing(user.id, mod_slug)


@router.get("/{list_id}", response_model=ModListDetail)
def get_mod_list(list_id: int, user: CurrentUser, mod_lists: ModLists):
    mod_list = mod_lists.get(list_id, user.id)
    if mod_list is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Mod list not found"
        )
    return mod_list


@router.put("/{list_id}", response_model=ModListUpdateResponse)
def update_mod_list(
    list_id: int, request: ModListUpdate, user: CurrentUser, mod_lists: ModLists
):
    """Update a mod list's name, description or visibility.

    A list that is missing or owned by someone else is left untouched and
    ``modList`` comes back null rather than raising 404.
    """
    updated = mod_lists.update(
        list_id, user.id, **request.model_dump(exclude_unset=True)
    )
    return {
        "message": "Mod list updated successfully",
        "mod_list": mod_lists.get(list_id, user.id) if updated else None,
    }


@router.delete("/{list_id}", response_model=MessageResponse)
def delete_mod_list(list_id: int, user: CurrentUser, mod_lists: ModLists):
    mod_lists.delete(list_id, user.id)
    return {"message": "Mod list deleted successfully"}


@router.post(
    "/{list_id}/mods",
    response_model=ModListModRead,
    status_code=status.HTTP_201_CREATED,
)
def add_mod(
    list_id: int, request: ModListModCreate, user: CurrentUser, mod_lists: ModLists
):
    """Add a mod to a mod list.

    Parameters:
        list_id: The target list.
        request: Slug, title, author and optional icon of the mod.
        user: The authenticated user.
        mod_lists: Mod list service bound to the request session.

    Raises:
        HTTPException: 404 if the list is not found or not owned, 409 if the
            mod is already in the list.
    """
    try:
        return mod_lists.add_member(
            list_id,
            user.id,
            slug=request.mod_slug,
            title=request.mod_title,
            author=request.mod_author,
            icon_url=request.mod_icon_url,
        )
    except ModListNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except IntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="Mod already in mod list"
        )


@router.delete("/{list_id}/mods", response_model=MessageResponse)
def remove_mod(
    list_id: int, request: ModListModRemove, user: CurrentUser, mod_lists: ModLists
):
    try:
        mod_lists.remove_member(list_id, user.id, request.mod_slug)
    except ModListNotFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return {"message": "Mod removed from mod list successfully"}


@router.get("/{list_id}/mods/check", response_model=MembershipCheck)
def check_mod(
    list_id: int,
    user: CurrentUser,
    mod_lists: ModLists,
    mod_slug: str = Query(alias="modSlug"),
):
    return {"is_in_mod_list": mod_lists.is_member(list_id, mod_slug)}

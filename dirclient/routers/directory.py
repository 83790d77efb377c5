from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ..deps import get_directory_client
from ..directory import DirectoryClient
from ..schema import AuthRequest, AuthResponse, GroupsResponse

log = logging.getLogger(__name__)

router = APIRouter()


@router.post("/auth", response_model=AuthResponse)
def auth(body: AuthRequest, client: DirectoryClient = Depends(get_directory_client)):
    result = client.authenticate(body.username, body.password)
    if not result.authenticated:
        log.info("Authentication failed for %s", body.username)
    return AuthResponse.from_result(result)


@router.get("/users", response_model=list[dict[str, str]])
def users_find(q: str = "", client: DirectoryClient = Depends(get_directory_client)):
    q = (q or "").strip()
    if not q:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Query parameter q is required.")
    return client.find_users(q)


@router.get("/users/{username}", response_model=dict[str, str])
def user_detail(username: str, client: DirectoryClient = Depends(get_directory_client)):
    return client.search_user(username)


@router.get("/users/{username}/groups", response_model=GroupsResponse)
def user_groups(username: str, client: DirectoryClient = Depends(get_directory_client)):
    return GroupsResponse(groups=client.groups_of_user(username))

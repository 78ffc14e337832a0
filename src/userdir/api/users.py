"""User API routes.

Learn: routes stay thin: they translate HTTP input into service
calls and wrap the result in a response model. Creation is public;
update and listing are behind AccessPolicyMiddleware, so an anonymous
caller gets a 401 envelope before the handler runs.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request

from userdir.db.store import UserStore, get_store
from userdir.schemas.common import GenericResponse
from userdir.schemas.user import AddUserRequest, GetUsersResponse
from userdir.services.user_query import OrderKey, QuerySpec
from userdir.services.user_service import UserCriteria, UserService

router = APIRouter(prefix="/user/v1")

def get_user_service(store: UserStore = Depends(get_store)) -> UserService:
    return UserService(store)


def _criteria(body: AddUserRequest) -> UserCriteria:
    return UserCriteria(
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
        phone_number=body.phone_number,
    )


@router.post("/user", response_model=GenericResponse)
def add_user(body: AddUserRequest, svc: UserService = Depends(get_user_service)):
    svc.add_user(_criteria(body))
    return GenericResponse.success("User added.")


@router.put("/user/{guid}", response_model=GenericResponse)
def update_user(
    guid: str,
    body: AddUserRequest,
    svc: UserService = Depends(get_user_service),
):
    svc.update_user(_criteria(body), guid)
    return GenericResponse.success("User update.")


@router.get("/user", response_model=GetUsersResponse)
def list_users(
    request: Request,
    query: Optional[str] = None,
    order: Optional[OrderKey] = None,
    offset: int = 0,
    limit: Optional[int] = None,
    svc: UserService = Depends(get_user_service),
):
    """Filter, sort and paginate users. See UserQueryEngine."""
    if limit is None:
        limit = request.app.state.settings.default_page_limit
    page = svc.get_users(
        QuerySpec(query=query, order=order, offset=offset, limit=limit)
    )
    return GetUsersResponse(total=page.total, users=page.items)

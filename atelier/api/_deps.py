"""
Dependencies — container access, bearer auth and the admin token.
"""

import hmac
from typing import Annotated

from fastapi import Depends, Header, Request
from kungfu import Ok, Error

from atelier._types import UserId
from atelier.container import Container
from atelier.errors import Errors


def get_container(request: Request) -> Container:
    return request.app.state.container


ContainerDep = Annotated[Container, Depends(get_container)]


def current_user(
    container: ContainerDep,
    authorization: Annotated[str | None, Header()] = None,
) -> UserId:
    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise Errors.unauthorized()
    match container.tokens.verify(token.strip()):
        case Ok(user_id):
            return user_id
        case Error(e):
            raise e


def is_admin(container: Container, token: str | None) -> bool:
    expected = container.settings.admin_token
    if not expected or not token:
        return False
    return hmac.compare_digest(expected.encode(), token.encode())


def require_admin(
    container: ContainerDep,
    x_admin_token: Annotated[str | None, Header()] = None,
) -> None:
    if not is_admin(container, x_admin_token):
        raise Errors.unauthorized()


CurrentUser = Annotated[UserId, Depends(current_user)]
AdminOnly = Depends(require_admin)


__all__ = (
    "get_container",
    "ContainerDep",
    "current_user",
    "CurrentUser",
    "is_admin",
    "require_admin",
    "AdminOnly",
)

"""
Dependency injection for the API.

Provides repositories bound to the Firestore client, the services built on
them, and the authentication / admin-gating dependencies.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials

from app.core.errors import ForbiddenError, UnauthorizedError
from app.models import Role
from app.services.auth_service import AuthService
from app.services.event_service import EventService
from app.services.firebase_client import get_firebase_app, get_firestore_client
from app.services.identity import FirebaseIdentityProvider
from app.services.profile_service import ProfileService
from app.services.repositories import EventRepo, ProfileRepo, TicketCategoryRepo, TicketRepo
from app.services.ticket_service import TicketService
from app.utils.security import CurrentUser, TokenService, security


def get_store_client():
    return get_firestore_client()


def get_event_repo(client=Depends(get_store_client)) -> EventRepo:
    return EventRepo(client)


def get_category_repo(client=Depends(get_store_client)) -> TicketCategoryRepo:
    return TicketCategoryRepo(client)


def get_ticket_repo(client=Depends(get_store_client)) -> TicketRepo:
    return TicketRepo(client)


def get_profile_repo(client=Depends(get_store_client)) -> ProfileRepo:
    return ProfileRepo(client)


@lru_cache(maxsize=1)
def get_identity_provider() -> FirebaseIdentityProvider:
    return FirebaseIdentityProvider(app=get_firebase_app())


@lru_cache(maxsize=1)
def get_token_service() -> TokenService:
    return TokenService()


def get_ticket_service(
    events=Depends(get_event_repo),
    categories=Depends(get_category_repo),
    tickets=Depends(get_ticket_repo),
) -> TicketService:
    return TicketService(events, categories, tickets)


def get_event_service(
    events=Depends(get_event_repo),
    ticket_service: TicketService = Depends(get_ticket_service),
) -> EventService:
    return EventService(events, ticket_service)


def get_profile_service(profiles=Depends(get_profile_repo)) -> ProfileService:
    return ProfileService(profiles)


def get_auth_service(
    identity=Depends(get_identity_provider),
    profiles=Depends(get_profile_repo),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(identity, profiles, tokens)


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
    identity=Depends(get_identity_provider),
    profiles=Depends(get_profile_repo),
) -> CurrentUser:
    """
    Authenticate the bearer token.

    Tokens issued by this API are checked locally; anything else is handed to
    Firebase Authentication as an ID token. The role always comes from the
    stored profile.

    Raises:
        UnauthorizedError: If the header is missing or the token is not valid
    """
    if credentials is None:
        raise UnauthorizedError("No token provided, authorization denied")

    token = credentials.credentials
    claims = tokens.verify(token)
    if claims:
        user_id, email = claims["sub"], claims["email"]
    else:
        identity_ = await identity.verify_id_token(token)
        if identity_ is None:
            raise UnauthorizedError("Token is not valid")
        user_id, email = identity_.uid, identity_.email

    profile = await profiles.get_by_id(user_id)
    user = CurrentUser(
        id=user_id,
        email=email,
        role=profile.role if profile else Role.USER,
        token=token,
    )
    request.state.user = user
    return user


async def require_admin(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Only let admins through"""
    if not current_user.is_admin:
        raise ForbiddenError("Admin access required")
    return current_user

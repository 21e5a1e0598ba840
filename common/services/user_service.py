from typing import Dict, Optional
from uuid import uuid4

from sqlalchemy import func, or_
from werkzeug.security import generate_password_hash

from ..errors import ConflictError, NotFoundError, ValidationError
from ..models.page import Page
from ..models.post import Post
from ..models.user import User
from ..schemas import UserPayload
from ..utils.dto import to_user_dto
from ..utils.pagination import normalize_paging, pagination_meta
from .logging import log_event


class UserService:
    """User accounts backed by DB. Password hashes never leave this service."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    @staticmethod
    def _counts(session, user_id: str) -> Dict[str, int]:
        return {
            "posts": session.query(func.count(Post.id)).filter(Post.author_id == user_id).scalar() or 0,
            "pages": session.query(func.count(Page.id)).filter(Page.author_id == user_id).scalar() or 0,
        }

    def list_users(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        role: Optional[str] = None,
        is_active: Optional[str] = None,
        search: Optional[str] = None,
        max_limit: int = 100,
    ) -> Dict:
        p, ps = normalize_paging(page, limit, max_limit)
        with self._session_factory() as session:
            q = session.query(User)
            if role and role.lower() != "all":
                q = q.filter(User.role == role.upper())
            if is_active is not None and is_active != "all":
                q = q.filter(User.is_active.is_(is_active == "true"))
            if search:
                like = f"%{search}%"
                q = q.filter(or_(User.name.ilike(like), User.email.ilike(like), User.username.ilike(like)))
            total = q.count()
            rows = q.order_by(User.created_at.desc(), User.email.asc()).offset((p - 1) * ps).limit(ps).all()
            users = [to_user_dto(u, self._counts(session, u.id)) for u in rows]
            return {"users": users, "pagination": pagination_meta(p, ps, total)}

    def get_user(self, user_id: str) -> Dict:
        with self._session_factory() as session:
            user = self._load(session, user_id)
            return to_user_dto(user, self._counts(session, user_id))

    def create_user(self, data: UserPayload) -> Dict:
        with self._session_factory() as session:
            self._ensure_free(session, data.email, data.username)
            user = User(
                id=str(uuid4()),
                email=data.email,
                username=data.username,
                name=data.name,
                password_hash=generate_password_hash(data.password),
                role=data.role,
                avatar=data.avatar,
                bio=data.bio,
                is_active=data.is_active,
            )
            session.add(user)
            session.flush()
            log_event("info", "user.created", user_id=user.id, role=user.role)
            return to_user_dto(user)

    def update_user(self, user_id: str, data: UserPayload) -> Dict:
        with self._session_factory() as session:
            user = self._load(session, user_id)
            self._ensure_free(session, data.email, data.username, exclude_id=user_id)
            if user.role == "SUPER_ADMIN" and data.role != "SUPER_ADMIN":
                self._ensure_other_super_admin(session, user_id)
            user.email = data.email
            user.username = data.username
            user.name = data.name
            user.role = data.role
            user.avatar = data.avatar
            user.bio = data.bio
            user.is_active = data.is_active
            # only rehash when a new password is supplied
            if data.password:
                user.password_hash = generate_password_hash(data.password)
            session.flush()
            return to_user_dto(user, self._counts(session, user_id))

    def delete_user(self, user_id: str) -> None:
        with self._session_factory() as session:
            user = self._load(session, user_id)
            if user.role == "SUPER_ADMIN":
                self._ensure_other_super_admin(session, user_id)
            if any(self._counts(session, user_id).values()):
                raise ValidationError("Cannot delete a user who still owns posts or pages.")
            session.delete(user)
            session.flush()
            log_event("info", "user.deleted", user_id=user_id)

    @staticmethod
    def _load(session, user_id: str) -> User:
        user = session.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFoundError("User not found")
        return user

    @staticmethod
    def _ensure_free(session, email: str, username: str, exclude_id: Optional[str] = None) -> None:
        q = session.query(User).filter(or_(User.email == email, User.username == username))
        if exclude_id:
            q = q.filter(User.id != exclude_id)
        if q.first():
            raise ConflictError("User with this email or username already exists")

    @staticmethod
    def _ensure_other_super_admin(session, user_id: str) -> None:
        others = (
            session.query(func.count(User.id))
            .filter(User.role == "SUPER_ADMIN", User.id != user_id)
            .scalar()
        )
        if not others:
            raise ValidationError("Cannot remove the last super admin user")

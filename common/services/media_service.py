from typing import Dict, Optional
from uuid import uuid4

from sqlalchemy import or_

from ..errors import NotFoundError, ValidationError
from ..models.media import Media
from ..models.user import User
from ..schemas import MediaPayload, MediaUpdatePayload
from ..utils.dto import to_media_dto
from ..utils.pagination import normalize_paging, pagination_meta
from .logging import log_event

_DOCUMENT_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
}


def media_type_for(mime_type: str) -> str:
    mime_type = (mime_type or "").lower()
    if mime_type.startswith("image/"):
        return "IMAGE"
    if mime_type.startswith("video/"):
        return "VIDEO"
    if mime_type.startswith("audio/"):
        return "AUDIO"
    if mime_type in _DOCUMENT_MIME_TYPES:
        return "DOCUMENT"
    return "OTHER"


class MediaService:
    """Media library records. Files themselves live outside the database."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def list_media(
        self,
        *,
        page: int = 1,
        limit: int = 10,
        media_type: Optional[str] = None,
        search: Optional[str] = None,
        max_limit: int = 100,
    ) -> Dict:
        p, ps = normalize_paging(page, limit, max_limit)
        with self._session_factory() as session:
            q = session.query(Media)
            if media_type and media_type.lower() != "all":
                q = q.filter(Media.type == media_type.upper())
            if search:
                like = f"%{search}%"
                q = q.filter(
                    or_(Media.original_name.ilike(like), Media.title.ilike(like), Media.alt_text.ilike(like))
                )
            total = q.count()
            rows = q.order_by(Media.created_at.desc(), Media.filename.asc()).offset((p - 1) * ps).limit(ps).all()
            uploader_ids = {m.uploaded_by for m in rows if m.uploaded_by}
            uploaders = (
                {u.id: u for u in session.query(User).filter(User.id.in_(uploader_ids)).all()}
                if uploader_ids
                else {}
            )
            media = [to_media_dto(m, uploaders.get(m.uploaded_by)) for m in rows]
            return {"media": media, "pagination": pagination_meta(p, ps, total)}

    def get_media(self, media_id: str) -> Dict:
        with self._session_factory() as session:
            media = self._load(session, media_id)
            return to_media_dto(media, self._uploader(session, media.uploaded_by))

    def create_media(self, data: MediaPayload, *, uploaded_by: Optional[str] = None) -> Dict:
        with self._session_factory() as session:
            uploader_id = data.uploaded_by or uploaded_by
            uploader = self._uploader(session, uploader_id)
            if uploader_id and uploader is None:
                raise ValidationError("uploaded_by must reference an existing user")
            media = Media(
                id=str(uuid4()),
                filename=data.filename,
                original_name=data.original_name,
                file_path=data.file_path,
                file_size=data.file_size,
                mime_type=data.mime_type,
                type=data.type or media_type_for(data.mime_type),
                alt_text=data.alt_text,
                title=data.title,
                caption=data.caption,
                description=data.description,
                uploaded_by=uploader_id,
            )
            session.add(media)
            session.flush()
            log_event("info", "media.created", media_id=media.id, type=media.type, size=media.file_size)
            return to_media_dto(media, uploader)

    def update_media(self, media_id: str, data: MediaUpdatePayload) -> Dict:
        with self._session_factory() as session:
            media = self._load(session, media_id)
            media.alt_text = data.alt_text
            media.title = data.title
            media.caption = data.caption
            media.description = data.description
            session.flush()
            return to_media_dto(media, self._uploader(session, media.uploaded_by))

    def delete_media(self, media_id: str) -> None:
        with self._session_factory() as session:
            media = self._load(session, media_id)
            session.delete(media)
            session.flush()
            log_event("info", "media.deleted", media_id=media_id)

    @staticmethod
    def _load(session, media_id: str) -> Media:
        media = session.query(Media).filter(Media.id == media_id).first()
        if not media:
            raise NotFoundError("Media not found")
        return media

    @staticmethod
    def _uploader(session, user_id: Optional[str]) -> Optional[User]:
        if not user_id:
            return None
        return session.query(User).filter(User.id == user_id).first()

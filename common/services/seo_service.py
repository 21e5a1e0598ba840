from typing import Optional
from uuid import uuid4

from ..models.seo_metadata import SeoMetadata
from ..schemas import SeoPayload


def _owner_filter(post_id: Optional[str], page_id: Optional[str]):
    if post_id:
        return SeoMetadata.post_id == post_id
    return SeoMetadata.page_id == page_id


def seo_for(session, *, post_id: Optional[str] = None, page_id: Optional[str] = None) -> Optional[SeoMetadata]:
    return session.query(SeoMetadata).filter(_owner_filter(post_id, page_id)).first()


def upsert_seo(session, seo: SeoPayload, *, post_id: Optional[str] = None, page_id: Optional[str] = None) -> SeoMetadata:
    """Create or overwrite the metadata row owned by one post or page."""
    row = seo_for(session, post_id=post_id, page_id=page_id)
    if row is None:
        row = SeoMetadata(id=str(uuid4()), post_id=post_id, page_id=page_id)
        session.add(row)
    for name, value in seo.as_columns().items():
        setattr(row, name, value)
    session.flush()
    return row


def delete_seo(session, *, post_id: Optional[str] = None, page_id: Optional[str] = None) -> int:
    return session.query(SeoMetadata).filter(_owner_filter(post_id, page_id)).delete(synchronize_session=False)

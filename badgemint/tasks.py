from badgemint.core.celery_config import celery_app
from badgemint.database.db import SessionLocal
from badgemint.services.badges import publish_badge_metadata


@celery_app.task(bind=True)
def publish_badge_metadata_task(self, badge_id: int):
    """Render and store the token metadata document for a freshly minted badge."""
    db = SessionLocal()
    try:
        publish_badge_metadata(db, badge_id)
    finally:
        db.close()

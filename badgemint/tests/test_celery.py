"""
Test Celery tasks.
"""
import json

from sqlalchemy.orm import Session

from badgemint.models import Badge, Event, MetadataStatus
from badgemint.tasks import publish_badge_metadata_task
from badgemint.tests.conftest import ALICE, BOB, ORGANIZER, T0


def _minted_badge(db_session: Session, owner: str = ALICE) -> Badge:
    event = db_session.query(Event).filter(Event.name == "Task Event").first()
    if event is None:
        event = Event(
            name="Task Event",
            description="Metadata rendering",
            image_uri="ipfs://bafytask",
            organizer=ORGANIZER,
            start_time=T0 + 10,
            end_time=T0 + 100,
            max_attendees=10,
        )
        db_session.add(event)
        db_session.commit()

    badge = Badge(event_id=event.id, owner=owner, token_uri=event.image_uri, minted_at=T0 + 50)
    db_session.add(badge)
    db_session.commit()
    db_session.refresh(badge)
    return badge


class TestCeleryTasks:
    """Test Celery task functionality."""

    def test_publish_badge_metadata_task_updates_status(self, db_session: Session):
        badge = _minted_badge(db_session)

        # SessionLocal is bound to the test database by the eager_celery fixture
        publish_badge_metadata_task.run(badge.id)

        db_session.refresh(badge)
        assert badge.metadata_status == MetadataStatus.PUBLISHED.value
        document = json.loads(badge.metadata_json)
        assert document["name"] == "Task Event Attendance Badge"
        assert document["description"] == "Metadata rendering"
        assert {"display_type": "date", "trait_type": "Minted", "value": T0 + 50} in document["attributes"]

    def test_publish_badge_metadata_task_with_nonexistent_badge(self, db_session: Session):
        # Should not raise an exception
        publish_badge_metadata_task.run(99999)

    def test_publish_is_idempotent(self, db_session: Session):
        badge = _minted_badge(db_session)

        publish_badge_metadata_task.run(badge.id)
        db_session.refresh(badge)
        first = badge.metadata_json

        publish_badge_metadata_task.run(badge.id)
        db_session.refresh(badge)
        assert badge.metadata_json == first

    def test_multiple_badges_published(self, db_session: Session):
        badges = [_minted_badge(db_session, owner) for owner in (ALICE, BOB)]

        for badge in badges:
            publish_badge_metadata_task.delay(badge.id)

        for badge in badges:
            db_session.refresh(badge)
            assert badge.metadata_status == MetadataStatus.PUBLISHED.value

    def test_celery_app_configuration(self):
        from badgemint.core.celery_config import celery_app

        assert celery_app.conf.task_serializer == "json"
        assert celery_app.conf.result_serializer == "json"
        assert "json" in celery_app.conf.accept_content
        assert celery_app.conf.task_track_started is True

    def test_publish_task_is_registered(self):
        from badgemint.core.celery_config import celery_app

        assert "badgemint.tasks.publish_badge_metadata_task" in celery_app.tasks

"""Row construction: factories hold the defaults, ids are assigned at flush."""

import pytest

from peerlearn.db.factories import new_course, new_enrollment
from tests.helpers import make_user


class TestFactoryDefaults:
    def test_defaults_set_before_persisting(self):
        enrollment = new_enrollment(student_id="stu", course_id="course-1")
        assert enrollment.is_completed is False
        assert enrollment.completed_at is None
        assert enrollment.enrolled_at is not None
        assert enrollment.id is None

    @pytest.mark.asyncio
    async def test_id_assigned_on_flush(self, db_session):
        mentor = await make_user(db_session, role="mentor")
        course = new_course(
            mentor_id=mentor.id, title="T", description="D", domain="Python", duration_hours=2
        )
        db_session.add(course)
        await db_session.flush()

        assert len(course.id) == 36
        assert course.is_active is True
        assert course.price == 0
        await db_session.commit()

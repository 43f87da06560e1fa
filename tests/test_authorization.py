"""
Unit tests for access-tier enforcement.
"""
import pytest

from database import get_db_context, Student
from tools import (
    AuthorizationService,
    StudentNotRegisteredError,
    InactiveStudentError,
    InsufficientAccessError,
)


class TestAuthorization:
    """Tests for the authorization service."""

    def test_get_student_by_identity(self, make_student):
        """Test resolving a Telegram identity to a student."""
        make_student(100, "ST001", access_level="monitor")

        with get_db_context() as db:
            auth = AuthorizationService(db)
            student = auth.get_student(100)
            assert student.student_id == "ST001"
            assert student.access_level == "monitor"

    def test_unregistered_identity(self, groups):
        """Test error on unknown Telegram identity."""
        with get_db_context() as db:
            auth = AuthorizationService(db)
            assert auth.find_student(9999) is None
            with pytest.raises(StudentNotRegisteredError):
                auth.get_student(9999)

    def test_inactive_student_is_unauthenticated(self, make_student):
        """Test a deactivated student fails every downstream check."""
        make_student(101, "ST002", access_level="owner", is_active=False)

        with get_db_context() as db:
            auth = AuthorizationService(db)
            with pytest.raises(InactiveStudentError):
                auth.get_active_student(101)
            with pytest.raises(InactiveStudentError):
                auth.enforce_homework_editor(101, "add homework")

    @pytest.mark.parametrize("level", ["monitor", "admin", "owner"])
    def test_homework_editors_allowed(self, make_student, level):
        """Test monitors, admins and owners pass the editor check."""
        make_student(200, "ST010", access_level=level)

        with get_db_context() as db:
            student = AuthorizationService(db).enforce_homework_editor(200, "add homework")
            assert student.access_level == level

    def test_student_tier_denied(self, make_student):
        """Test a student-tier caller fails the editor check."""
        make_student(201, "ST011", access_level="student")

        with get_db_context() as db:
            with pytest.raises(InsufficientAccessError) as exc_info:
                AuthorizationService(db).enforce_homework_editor(201, "delete homework")

        assert exc_info.value.access_level == "student"
        assert "delete homework" in exc_info.value.message

    def test_access_level_read_fresh(self, make_student):
        """Test a demotion takes effect on the next check."""
        make_student(202, "ST012", access_level="monitor")

        with get_db_context() as db:
            AuthorizationService(db).enforce_homework_editor(202, "add homework")

        with get_db_context() as db:
            db.query(Student).filter(Student.telegram_user_id == 202).update({"access_level": "student"})

        with get_db_context() as db:
            with pytest.raises(InsufficientAccessError):
                AuthorizationService(db).enforce_homework_editor(202, "add homework")

    @pytest.mark.parametrize("level,expected", [
        ("student", False),
        ("monitor", False),
        ("admin", True),
        ("owner", True),
    ])
    def test_cross_group_viewers(self, make_student, level, expected):
        """Test only admins and owners may view other groups."""
        make_student(300, "ST020", access_level=level)

        with get_db_context() as db:
            auth = AuthorizationService(db)
            assert auth.can_view_all_groups(auth.get_student(300)) is expected

    def test_unknown_access_level_treated_as_student(self, make_student):
        """Test an unexpected stored value never grants privileges."""
        make_student(301, "ST021", access_level="superuser")

        with get_db_context() as db:
            with pytest.raises(InsufficientAccessError):
                AuthorizationService(db).enforce_homework_editor(301, "add homework")

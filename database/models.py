"""
Database models for the Classroom Bot.
Defines the SQLAlchemy models for groups, students, homework and sessions.
"""
from enum import Enum as PyEnum
from sqlalchemy import (
    Column, Integer, BigInteger, String, Text, Boolean, DateTime, JSON, ForeignKey
)
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class AccessLevel(str, PyEnum):
    """Access tiers, in ascending order of privilege."""
    STUDENT = "student"
    MONITOR = "monitor"
    ADMIN = "admin"
    OWNER = "owner"


class Group(Base):
    """
    Groups (classes) table.

    Attributes:
        id: Unique identifier
        group_name: Display name, unique
        description: Optional free text
    """
    __tablename__ = "groups"

    id = Column(Integer, primary_key=True, autoincrement=True)
    group_name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    # Relationships
    students = relationship("Student", back_populates="group")
    homework = relationship("Homework", back_populates="group")

    def __repr__(self):
        return f"<Group(id={self.id}, group_name='{self.group_name}')>"


class Student(Base):
    """
    Students table - one row per Telegram account bound to a roster student ID.

    Attributes:
        id: Internal identifier
        telegram_user_id: External (Telegram) identity, unique
        telegram_username: Last known Telegram handle
        student_id: Roster key, unique, stored in canonical upper-case form
        group_id: Group the student belongs to
        access_level: One of AccessLevel
        is_active: Deactivated students are treated as unauthenticated
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_user_id = Column(BigInteger, nullable=False, unique=True)
    telegram_username = Column(String(255), nullable=True)
    student_id = Column(String(64), nullable=False, unique=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=True)
    access_level = Column(String(16), nullable=False, default=AccessLevel.STUDENT.value)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    # Relationships
    group = relationship("Group", back_populates="students")
    created_homework = relationship("Homework", back_populates="creator")

    def __repr__(self):
        return f"<Student(id={self.id}, student_id='{self.student_id}', access_level='{self.access_level}')>"

    @property
    def display_name(self):
        """'First Last', or None when no first name is known."""
        if not self.first_name:
            return None
        return f"{self.first_name} {self.last_name or ''}".strip()


class Homework(Base):
    """
    Homework assignments, visible to the group they belong to.

    Attributes:
        id: Unique identifier
        title: Short title
        description: Optional details
        subject: Optional subject name
        due_date: Optional deadline
        group_id: Group the assignment is scoped to
        created_by: Student who created it (informational only)
    """
    __tablename__ = "homework"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    subject = Column(String(255), nullable=True)
    due_date = Column(DateTime, nullable=True)
    group_id = Column(Integer, ForeignKey("groups.id"), nullable=False)
    created_by = Column(Integer, ForeignKey("students.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    # Relationships
    group = relationship("Group", back_populates="homework")
    creator = relationship("Student", back_populates="created_homework")

    def __repr__(self):
        return f"<Homework(id={self.id}, title='{self.title}', group_id={self.group_id})>"

    def to_dict(self):
        """Convert homework to dictionary for tool and API responses."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "due_date": self.due_date.isoformat() if self.due_date else None,
            "group_id": self.group_id,
            "group_name": self.group.group_name if self.group else "Unknown",
            "creator_name": self.creator.display_name if self.creator else None,
            "created_at": self.created_at.isoformat() if self.created_at else "",
        }


class UserSession(Base):
    """Per-user conversation bookkeeping (thread, chat and last activity)."""
    __tablename__ = "user_sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    telegram_user_id = Column(BigInteger, nullable=False, index=True)
    session_data = Column(JSON, nullable=True)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())

    def __repr__(self):
        return f"<UserSession(id={self.id}, telegram_user_id={self.telegram_user_id})>"

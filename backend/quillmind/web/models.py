"""SQLAlchemy models.

The application owns writes to these tables; this service only reads them.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from .database import Base


class Project(Base):
    __tablename__ = "projects"

    project_id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    files = relationship("File", back_populates="project", cascade="all, delete-orphan")


class File(Base):
    """A file or folder in a project's tree. Folders have no content."""

    __tablename__ = "files"
    __table_args__ = (CheckConstraint("type IN ('file', 'folder')", name="ck_files_type"),)

    file_id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.project_id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(Integer, ForeignKey("files.file_id", ondelete="CASCADE"), nullable=True)
    name = Column(String(1024), nullable=False, index=True)
    type = Column(String(16), nullable=False)
    content = Column(Text)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    project = relationship("Project", back_populates="files")

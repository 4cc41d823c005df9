"""Task service: the only reader and writer of task rows.

Every query is filtered by the owning user's id. A task that exists but
belongs to someone else is reported exactly like a missing one.
"""

from datetime import timedelta

from sqlalchemy import not_, update
from sqlalchemy.orm import Session

from app.database import utcnow
from app.exceptions import TaskNotFoundError, ValidationFailedError
from app.models.task import Task
from app.schemas.task import TaskSort, TaskStatusFilter
from app.validation import clean_description, clean_title

_UNSET = object()

# Largest value a 32-bit INTEGER primary key can hold
MAX_TASK_ID = 2**31 - 1


def _validated(clean, value):
    try:
        return clean(value)
    except ValueError as e:
        raise ValidationFailedError(str(e)) from None


class TaskService:
    """Handles task CRUD scoped to a single user."""

    def list_tasks(
        self,
        db: Session,
        user_id: str,
        status: TaskStatusFilter = TaskStatusFilter.ALL,
        sort: TaskSort = TaskSort.CREATED,
    ) -> list[Task]:
        """List a user's tasks, optionally filtered by completion and sorted."""
        query = db.query(Task).filter(Task.user_id == user_id)

        if status == TaskStatusFilter.PENDING:
            query = query.filter(Task.completed.is_(False))
        elif status == TaskStatusFilter.COMPLETED:
            query = query.filter(Task.completed.is_(True))

        if sort == TaskSort.TITLE:
            query = query.order_by(Task.title.asc(), Task.id.asc())
        elif sort == TaskSort.UPDATED:
            query = query.order_by(Task.updated_at.desc(), Task.id.desc())
        else:
            query = query.order_by(Task.created_at.desc(), Task.id.desc())

        return query.all()

    def create_task(self, db: Session, user_id: str, title: str, description: str | None = None) -> Task:
        """Create a pending task owned by the user."""
        now = utcnow()
        task = Task(
            user_id=user_id,
            title=_validated(clean_title, title),
            description=_validated(clean_description, description),
            completed=False,
            created_at=now,
            updated_at=now,
        )
        db.add(task)
        db.commit()
        db.refresh(task)
        return task

    def get_task(self, db: Session, user_id: str, task_id: int) -> Task:
        """Get a single task by ID, scoped to user. Raises TaskNotFoundError."""
        if not 1 <= task_id <= MAX_TASK_ID:
            raise TaskNotFoundError()
        task = db.query(Task).filter(Task.id == task_id, Task.user_id == user_id).first()
        if not task:
            raise TaskNotFoundError()
        return task

    def update_task(self, db: Session, user_id: str, task_id: int, title=_UNSET, description=_UNSET) -> Task:
        """Apply the given fields to a task. Omitted fields are left untouched."""
        task = self.get_task(db, user_id, task_id)
        if title is not _UNSET:
            task.title = _validated(clean_title, title)
        if description is not _UNSET:
            task.description = _validated(clean_description, description)
        self._touch(task)
        db.commit()
        db.refresh(task)
        return task

    def toggle_complete(self, db: Session, user_id: str, task_id: int) -> Task:
        """Flip a task's completed flag in a single UPDATE so concurrent toggles are not lost."""
        task = self.get_task(db, user_id, task_id)
        result = db.execute(
            update(Task)
            .where(Task.id == task_id, Task.user_id == user_id)
            .values(completed=not_(Task.completed), updated_at=self._next_stamp(task))
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            db.rollback()
            raise TaskNotFoundError()
        db.commit()
        db.refresh(task)
        return task

    def delete_task(self, db: Session, user_id: str, task_id: int) -> None:
        """Permanently delete a task."""
        task = self.get_task(db, user_id, task_id)
        db.delete(task)
        db.commit()

    @staticmethod
    def _next_stamp(task: Task):
        # updated_at must strictly increase even when two writes land in the same clock tick
        now = utcnow()
        if task.updated_at is not None and now <= task.updated_at:
            now = task.updated_at + timedelta(microseconds=1)
        return now

    def _touch(self, task: Task) -> None:
        task.updated_at = self._next_stamp(task)


_task_service: TaskService | None = None


def get_task_service() -> TaskService:
    """Get singleton task service instance."""
    global _task_service
    if _task_service is None:
        _task_service = TaskService()
    return _task_service

"""Task API endpoints."""

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import CurrentUser, get_current_user
from app.schemas.task import TaskCreate, TaskResponse, TaskSort, TaskStatusFilter, TaskUpdate
from app.services.task import get_task_service

router = APIRouter(prefix="/api/tasks", tags=["Tasks"])


@router.get("", response_model=list[TaskResponse])
def list_tasks(
    status: TaskStatusFilter = TaskStatusFilter.ALL,
    sort: TaskSort = TaskSort.CREATED,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> list[TaskResponse]:
    """List the current user's tasks."""
    service = get_task_service()
    tasks = service.list_tasks(db, user.user_id, status=status, sort=sort)
    return [TaskResponse.model_validate(t) for t in tasks]


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    body: TaskCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Create a task."""
    service = get_task_service()
    task = service.create_task(db, user.user_id, body.title, body.description)
    return TaskResponse.model_validate(task)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(
    task_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Get a single task by ID."""
    service = get_task_service()
    return TaskResponse.model_validate(service.get_task(db, user.user_id, task_id))


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: int,
    body: TaskUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Update a task's title and/or description."""
    service = get_task_service()
    changes = body.model_dump(exclude_unset=True)
    task = service.update_task(db, user.user_id, task_id, **changes)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
def delete_task(
    task_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Response:
    """Delete a task."""
    service = get_task_service()
    service.delete_task(db, user.user_id, task_id)
    return Response(status_code=204)


@router.patch("/{task_id}/complete", response_model=TaskResponse)
def toggle_task_complete(
    task_id: int,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> TaskResponse:
    """Toggle a task between pending and completed."""
    service = get_task_service()
    return TaskResponse.model_validate(service.toggle_complete(db, user.user_id, task_id))

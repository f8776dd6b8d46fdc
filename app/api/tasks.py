"""Task API endpoints."""

from fastapi import APIRouter, HTTPException, Response, status

from app.api.deps import CurrentUser, TaskServiceDep
from app.models.task import TaskCreate, TaskResponse, TaskUpdate

router = APIRouter(prefix="/tasks", tags=["Tasks"])

TASK_NOT_FOUND = "Task not found"


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
def create_task_endpoint(
    service: TaskServiceDep,
    current_user: CurrentUser,
    task_data: TaskCreate,
) -> TaskResponse:
    """Create a new task; the caller's address receives the confirmation."""
    if not task_data.title.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title is required",
        )

    task = service.create_task(
        task_data.title,
        task_data.description,
        user_id=current_user.user_id if current_user else None,
        user_email=current_user.email if current_user else None,
    )
    return TaskResponse.model_validate(task)


@router.get("", response_model=list[TaskResponse])
def list_tasks_endpoint(service: TaskServiceDep) -> list[TaskResponse]:
    """List all tasks."""
    return [TaskResponse.model_validate(t) for t in service.get_all_tasks()]


@router.get("/{task_id}", response_model=TaskResponse)
def get_task_endpoint(service: TaskServiceDep, task_id: str) -> TaskResponse:
    """Get a specific task by ID."""
    task = service.get_task(task_id)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskResponse.model_validate(task)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task_endpoint(
    service: TaskServiceDep,
    task_id: str,
    task_data: TaskUpdate,
) -> TaskResponse:
    """Update a task's title and/or description."""
    # Validate that title is not blank if provided
    if task_data.title is not None and len(task_data.title.strip()) == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Title cannot be empty",
        )

    task = service.update_task(task_id, task_data.title, task_data.description)
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}/complete", response_model=TaskResponse)
def complete_task_endpoint(
    service: TaskServiceDep,
    current_user: CurrentUser,
    task_id: str,
) -> TaskResponse:
    """Mark a task completed."""
    task = service.complete_task(
        task_id,
        user_id=current_user.user_id if current_user else None,
        user_email=current_user.email if current_user else None,
    )
    if task is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task_endpoint(service: TaskServiceDep, task_id: str) -> Response:
    """Delete a task."""
    if not service.delete_task(task_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=TASK_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

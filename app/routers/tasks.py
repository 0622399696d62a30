import logging

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.config import DEFAULT_USER_ID
from app.database import get_db
from app.exceptions import TaskNotFoundError
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskOut, TaskUpdate

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tasks", tags=["tasks"])


def get_task_owner_id() -> int:
    """Owner for newly created tasks.

    There is no caller identity yet, so every task goes to the configured
    default user. Override this dependency once requests are authenticated.
    """
    return DEFAULT_USER_ID


def _get_task_or_404(db: Session, task_id: int) -> Task:
    task = db.get(Task, task_id)
    if task is None:
        logger.warning("Task %s not found", task_id)
        raise TaskNotFoundError(task_id)
    return task


@router.get("", response_model=list[TaskOut])
def list_tasks(db: Session = Depends(get_db)):
    return db.query(Task).order_by(Task.id).all()


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    response: Response,
    db: Session = Depends(get_db),
    owner_id: int = Depends(get_task_owner_id),
):
    new = Task(title=task.title, is_done=task.is_done, user_id=owner_id)
    db.add(new)
    db.commit()
    db.refresh(new)
    response.headers["Location"] = f"/tasks/{new.id}"
    logger.info("Created task %s for user %s", new.id, owner_id)
    return new


@router.put("/{task_id}", response_model=TaskOut)
def update_task(task_id: int, task: TaskUpdate, db: Session = Depends(get_db)):
    existing = _get_task_or_404(db, task_id)
    # full replace: both fields are overwritten, nothing carried over
    existing.title = task.title
    existing.is_done = task.is_done
    db.commit()
    db.refresh(existing)
    logger.info("Updated task %s", task_id)
    return existing


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    task = _get_task_or_404(db, task_id)
    db.delete(task)
    db.commit()
    logger.info("Deleted task %s", task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

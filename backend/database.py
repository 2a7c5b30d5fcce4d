import logging
import sqlite3
import uuid
from datetime import date, datetime
from typing import Optional
from contextlib import contextmanager

import config
from models import TITLE_MAX_LENGTH, Task

logger = logging.getLogger(__name__)

DATABASE_PATH = config.DATABASE_PATH

# Fields callers may change after creation
UPDATABLE_FIELDS = ("completed", "title", "date", "notes")


class TaskNotFoundError(LookupError):
    """Raised when an update or delete targets a task id that does not exist."""

    def __init__(self, task_id: str):
        super().__init__(f"Task not found: {task_id}")
        self.task_id = task_id


@contextmanager
def get_db():
    """Context manager for database connections."""
    conn = sqlite3.connect(DATABASE_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()

def init_db():
    """Initialize database by running Alembic migrations."""
    import subprocess
    import os

    # Run alembic upgrade from the backend directory
    backend_dir = os.path.dirname(os.path.abspath(__file__))
    subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=backend_dir,
        check=True
    )

def _row_to_task(row) -> Task:
    """Convert a database row to a Task model."""
    return Task(
        id=row["id"],
        title=row["title"],
        date=date.fromisoformat(row["date"]),
        advice=row["advice"] or "",
        notes=row["notes"] or "",
        completed=bool(row["completed"]),
        created_at=datetime.fromisoformat(row["created_at"]),
    )


def create_task_db(
    title: str,
    task_date: date,
    notes: str = "",
    advice: str = "",
    task_id: Optional[str] = None
) -> Task:
    """Insert a new task. id and created_at are assigned here; completed starts False."""
    task = Task(
        id=task_id or str(uuid.uuid4()),
        title=title.strip(),
        date=task_date,
        advice=advice or "",
        notes=notes or "",
        completed=False,
        created_at=datetime.now(),
    )

    with get_db() as conn:
        conn.execute(
            """INSERT INTO tasks (id, title, date, advice, notes, completed, created_at)
               VALUES (?, ?, ?, ?, ?, 0, ?)""",
            (task.id, task.title, task.date.isoformat(), task.advice, task.notes, task.created_at.isoformat())
        )
        conn.commit()

    logger.info("Task saved to database: %s", task.id)
    return task


def get_tasks_db(
    completed: Optional[bool] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None
) -> list[Task]:
    """
    List tasks matching every filter given.
    Date bounds are inclusive. Ordered by date ascending, then newest first.
    """
    clauses = []
    params = []
    if completed is not None:
        clauses.append("completed = ?")
        params.append(int(completed))
    if date_from is not None:
        clauses.append("date >= ?")
        params.append(date_from.isoformat())
    if date_to is not None:
        clauses.append("date <= ?")
        params.append(date_to.isoformat())

    where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
    with get_db() as conn:
        rows = conn.execute(
            f"SELECT * FROM tasks {where} ORDER BY date ASC, created_at DESC",
            params
        ).fetchall()
        tasks = [_row_to_task(row) for row in rows]

    logger.debug("Retrieved %d tasks from database", len(tasks))
    return tasks


def get_task_db(task_id: str) -> Optional[Task]:
    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if row:
            return _row_to_task(row)
    return None


def update_task_db(task_id: str, **updates) -> Task:
    """
    Update a task with any fields provided.
    Only updates fields that differ from current values.

    Args:
        task_id: Task ID to update
        **updates: completed, title, date and/or notes

    Raises:
        TaskNotFoundError: no task has this id
        ValueError: a field outside UPDATABLE_FIELDS was given
    """
    unknown = set(updates) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Invalid update fields: {', '.join(sorted(unknown))}")

    with get_db() as conn:
        row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        if not row:
            raise TaskNotFoundError(task_id)

        # Filter updates: only include fields that differ from current values
        changes = {}
        for field, new_value in updates.items():
            if field == "title":
                new_value = new_value.strip()
                if not new_value or len(new_value) > TITLE_MAX_LENGTH:
                    raise ValueError(f"Task title must be 1-{TITLE_MAX_LENGTH} characters")
            # Convert to SQLite storage form before comparing
            if isinstance(new_value, bool):
                new_value = int(new_value)
            elif isinstance(new_value, date):
                new_value = new_value.isoformat()

            if new_value != row[field]:
                changes[field] = new_value

        # Execute UPDATE only if there are actual changes
        if changes:
            set_clause = ", ".join(f"{field} = ?" for field in changes.keys())
            values = list(changes.values()) + [task_id]
            conn.execute(f"UPDATE tasks SET {set_clause} WHERE id = ?", values)
            conn.commit()
            logger.info("Task updated: %s (%s)", task_id, ", ".join(changes))

        # Return updated task (re-fetch to get current state)
        updated_row = conn.execute("SELECT * FROM tasks WHERE id = ?", (task_id,)).fetchone()
        return _row_to_task(updated_row)


def delete_task_db(task_id: str) -> None:
    """Delete a task. Raises TaskNotFoundError if no task has this id."""
    with get_db() as conn:
        cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        conn.commit()
        if cursor.rowcount == 0:
            raise TaskNotFoundError(task_id)
    logger.info("Task deleted: %s", task_id)

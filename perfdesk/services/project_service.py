from typing import Any, Dict, List, Mapping

from sqlalchemy.orm import Session

from perfdesk.core.context import RequestContext
from perfdesk.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from perfdesk.models.project import Project, ProjectTask
from perfdesk.repositories import ProjectRepository, UserRepository
from perfdesk.services.base import BaseService

# Non-admin assignees may only move their task along
TASK_ASSIGNEE_FIELDS = frozenset({"status"})


class ProjectService(BaseService):
    def __init__(self, db: Session):
        super().__init__(db)
        self.projects = ProjectRepository(db)
        self.users = UserRepository(db)

    def list(self, ctx: RequestContext) -> List[Project]:
        projects = self.projects.find(order_by=[Project.created_at.desc(), Project.id.desc()])
        if ctx.is_admin:
            return projects
        return [p for p in projects if ctx.user_id in p.member_ids or p.created_by == ctx.user_id]

    def create(self, ctx: RequestContext, data: Dict[str, Any]) -> Project:
        self._require_admin(ctx, "Only admins can create projects")
        data = dict(data)
        members = self._resolve_members(data.pop("member_ids", None) or [])
        project = Project(created_by=ctx.user_id, members=members, **data)
        project = self.projects.create(project)
        self.log_info(f"Project {project.id} created by user {ctx.user_id}")
        return project

    def update(self, ctx: RequestContext, project_id: int, changes: Mapping[str, Any]) -> Project:
        self._require_admin(ctx, "Only admins can update projects")
        project = self._get_or_404(project_id)
        changes = dict(changes)
        if "member_ids" in changes:
            project.members = self._resolve_members(changes.pop("member_ids") or [])
        return self.projects.update(project, changes)

    def add_task(self, ctx: RequestContext, project_id: int, data: Dict[str, Any]) -> Project:
        self._require_admin(ctx, "Only admins can add tasks")
        project = self._get_or_404(project_id)
        assignee = data.get("assigned_to")
        if assignee is not None and self.users.get(assignee) is None:
            raise ValidationError(f"Assignee {assignee} does not exist")
        project.tasks.append(ProjectTask(**data))
        return self.projects.save(project)

    def update_task(
        self, ctx: RequestContext, project_id: int, task_id: int, changes: Mapping[str, Any]
    ) -> Project:
        project = self._get_or_404(project_id)
        task = self._task_or_404(project, task_id)

        if not ctx.is_admin:
            if task.assigned_to != ctx.user_id:
                raise AuthorizationError("You can only update tasks assigned to you")
            changes = {k: v for k, v in changes.items() if k in TASK_ASSIGNEE_FIELDS}

        assignee = changes.get("assigned_to")
        if assignee is not None and self.users.get(assignee) is None:
            raise ValidationError(f"Assignee {assignee} does not exist")
        for field, value in changes.items():
            setattr(task, field, value)
        return self.projects.save(project)

    def delete_task(self, ctx: RequestContext, project_id: int, task_id: int) -> Project:
        self._require_admin(ctx, "Only admins can remove tasks")
        project = self._get_or_404(project_id)
        task = self._task_or_404(project, task_id)
        project.tasks.remove(task)
        project = self.projects.save(project)
        self.log_info(f"Task {task_id} removed from project {project_id} by user {ctx.user_id}")
        return project

    def _get_or_404(self, project_id: int) -> Project:
        project = self.projects.get(project_id)
        if project is None:
            raise NotFoundError("Project", project_id)
        return project

    @staticmethod
    def _task_or_404(project: Project, task_id: int) -> ProjectTask:
        task = next((t for t in project.tasks if t.id == task_id), None)
        if task is None:
            raise NotFoundError("Task", task_id)
        return task

    def _resolve_members(self, member_ids) -> list:
        members = []
        for user_id in member_ids:
            user = self.users.get(user_id)
            if user is None:
                raise ValidationError(f"Member {user_id} does not exist")
            members.append(user)
        return members

    @staticmethod
    def _require_admin(ctx: RequestContext, message: str) -> None:
        if not ctx.is_admin:
            raise AuthorizationError(message)

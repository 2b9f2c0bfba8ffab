from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.request import Request

from tasktracker.constants.messages import AppMessages
from tasktracker.dto.task_dto import AssignmentHistoryDTO, GetTasksResponse, TaskDTO, TaskStatsDTO
from tasktracker.serializers.create_task_serializer import CreateTaskSerializer
from tasktracker.serializers.get_tasks_serializer import GetTaskQueryParamsSerializer
from tasktracker.serializers.update_task_serializer import UpdateTaskSerializer
from tasktracker.services.task_service import TaskService
from tasktracker.views.base import EnvelopeAPIView

TASK_ID_PARAMETER = OpenApiParameter(
    name="task_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="Unique identifier of the task",
)
TEAM_ID_PARAMETER = OpenApiParameter(
    name="team_id",
    type=OpenApiTypes.STR,
    location=OpenApiParameter.PATH,
    description="Unique identifier of the team",
)


class TaskListView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_tasks",
        summary="Get paginated list of tasks",
        description="""
        Tasks readable by the authenticated user: their personal tasks plus the readable
        tasks of every team they belong to. Pass `team` to restrict to one team.

        Archived tasks are excluded unless `includeArchived=true`. `overdue=true|false`
        filters on the derived overdue flag.
        """,
        tags=["tasks"],
        parameters=[GetTaskQueryParamsSerializer],
        responses={
            200: OpenApiResponse(response=GetTasksResponse, description="Tasks fetched"),
            400: OpenApiResponse(description="Invalid query parameters"),
        },
    )
    def get(self, request: Request):
        query = GetTaskQueryParamsSerializer(data=request.query_params)
        if not query.is_valid():
            return self._handle_validation_errors(query.errors)

        response = TaskService.get_tasks(
            request.user_id,
            query.get_filters(),
            page=query.validated_data["page"],
            limit=query.validated_data["limit"],
            sort_by=query.validated_data["sortBy"],
            order=query.validated_data["order"],
        )
        return self._success(response, AppMessages.TASKS_FETCHED)

    @extend_schema(
        operation_id="create_task",
        summary="Create new task",
        description="""
        Create a personal task, or a team task when `team` is given.

        Team tasks need an owner or admin, a `dueDate`, and an `assignedTo` (if any)
        who is a current member of the team.
        """,
        tags=["tasks"],
        request=CreateTaskSerializer,
        responses={
            201: OpenApiResponse(response=TaskDTO, description="Task created"),
            400: OpenApiResponse(description="Bad request - validation error"),
            403: OpenApiResponse(description="Not allowed to create tasks in this team"),
            422: OpenApiResponse(description="Task violates a business rule"),
        },
    )
    def post(self, request: Request):
        serializer = CreateTaskSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        task = TaskService.create_task(request.user_id, serializer.validated_data)
        return self._success(task, AppMessages.TASK_CREATED, status.HTTP_201_CREATED)


class TeamTaskListView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_team_tasks",
        summary="List a team's tasks",
        tags=["tasks"],
        parameters=[TEAM_ID_PARAMETER, GetTaskQueryParamsSerializer],
        responses={
            200: OpenApiResponse(response=GetTasksResponse, description="Tasks fetched"),
            403: OpenApiResponse(description="Not a member of this team"),
            404: OpenApiResponse(description="Team not found"),
        },
    )
    def get(self, request: Request, team_id: str):
        query = GetTaskQueryParamsSerializer(data=request.query_params)
        if not query.is_valid():
            return self._handle_validation_errors(query.errors)

        filters = query.get_filters()
        filters["team"] = team_id
        response = TaskService.get_tasks(
            request.user_id,
            filters,
            page=query.validated_data["page"],
            limit=query.validated_data["limit"],
            sort_by=query.validated_data["sortBy"],
            order=query.validated_data["order"],
        )
        return self._success(response, AppMessages.TASKS_FETCHED)

    @extend_schema(
        operation_id="create_team_task",
        summary="Create a task in a team",
        tags=["tasks"],
        parameters=[TEAM_ID_PARAMETER],
        request=CreateTaskSerializer,
        responses={
            201: OpenApiResponse(response=TaskDTO, description="Task created"),
            403: OpenApiResponse(description="Not allowed to create tasks in this team"),
            404: OpenApiResponse(description="Team not found"),
            422: OpenApiResponse(description="Task violates a business rule"),
        },
    )
    def post(self, request: Request, team_id: str):
        serializer = CreateTaskSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        payload = dict(serializer.validated_data)
        payload["team"] = team_id
        task = TaskService.create_task(request.user_id, payload)
        return self._success(task, AppMessages.TASK_CREATED, status.HTTP_201_CREATED)


class TaskDetailView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_task_by_id",
        summary="Get task by ID",
        tags=["tasks"],
        parameters=[TASK_ID_PARAMETER],
        responses={
            200: OpenApiResponse(response=TaskDTO, description="Task fetched"),
            403: OpenApiResponse(description="Not allowed to read this task"),
            404: OpenApiResponse(description="Task not found"),
        },
    )
    def get(self, request: Request, task_id: str):
        task = TaskService.get_task(request.user_id, task_id)
        return self._success(task, AppMessages.TASK_FETCHED)

    @extend_schema(
        operation_id="update_task",
        summary="Update a task",
        description="Partial update. Changing `assignedTo` (including to null) appends to the assignment history.",
        tags=["tasks"],
        parameters=[TASK_ID_PARAMETER],
        request=UpdateTaskSerializer,
        responses={
            200: OpenApiResponse(response=TaskDTO, description="Task updated"),
            403: OpenApiResponse(description="Not allowed to update this task"),
            404: OpenApiResponse(description="Task not found"),
            409: OpenApiResponse(description="Concurrent modification"),
            422: OpenApiResponse(description="Task violates a business rule"),
        },
    )
    def put(self, request: Request, task_id: str):
        serializer = UpdateTaskSerializer(data=request.data)
        if not serializer.is_valid():
            return self._handle_validation_errors(serializer.errors)

        task = TaskService.update_task(request.user_id, task_id, serializer.validated_data)
        return self._success(task, AppMessages.TASK_UPDATED)

    @extend_schema(
        operation_id="delete_task",
        summary="Delete a task",
        tags=["tasks"],
        parameters=[TASK_ID_PARAMETER],
        responses={
            200: OpenApiResponse(description="Task deleted"),
            403: OpenApiResponse(description="Not allowed to delete this task"),
            404: OpenApiResponse(description="Task not found"),
        },
    )
    def delete(self, request: Request, task_id: str):
        TaskService.delete_task(request.user_id, task_id)
        return self._success(None, AppMessages.TASK_DELETED)


class TaskArchiveView(EnvelopeAPIView):
    @extend_schema(
        operation_id="toggle_task_archive",
        summary="Archive or restore a task",
        tags=["tasks"],
        parameters=[TASK_ID_PARAMETER],
        request=None,
        responses={200: OpenApiResponse(response=TaskDTO, description="Archive flag toggled")},
    )
    def put(self, request: Request, task_id: str):
        task = TaskService.archive_task(request.user_id, task_id)
        message = AppMessages.TASK_ARCHIVED if task.isArchived else AppMessages.TASK_RESTORED
        return self._success(task, message)


class TaskHistoryView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_task_assignment_history",
        summary="Assignment history of a task",
        tags=["tasks"],
        parameters=[TASK_ID_PARAMETER],
        responses={200: OpenApiResponse(response=AssignmentHistoryDTO, description="History entries, oldest first")},
    )
    def get(self, request: Request, task_id: str):
        history = TaskService.get_assignment_history(request.user_id, task_id)
        return self._success(history, AppMessages.TASK_FETCHED)


class TaskStatsView(EnvelopeAPIView):
    @extend_schema(
        operation_id="get_task_stats",
        summary="Personal task dashboard",
        description="Counts per status, overdue and archived totals, recent tasks and deadlines in the next 7 days.",
        tags=["tasks"],
        responses={200: OpenApiResponse(response=TaskStatsDTO, description="Stats fetched")},
    )
    def get(self, request: Request):
        stats = TaskService.get_task_stats(request.user_id)
        return self._success(stats, AppMessages.TASKS_FETCHED)

from enum import Enum


class TaskStatus(Enum):
    TODO = "todo"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


class TaskPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TaskVisibility(Enum):
    PERSONAL = "personal"
    TEAM = "team"
    ASSIGNED = "assigned"


class AssignmentReason(Enum):
    ASSIGNED = "assigned"
    REASSIGNED = "reassigned"
    UNASSIGNED = "unassigned"
    MEMBER_REMOVED = "member-removed"
    MEMBER_LEFT = "member-left"


TASK_TITLE_MAX_LENGTH = 100
TASK_DESCRIPTION_MAX_LENGTH = 1000
TASK_TAG_MAX_LENGTH = 20
DUE_SOON_DAYS = 7

SORT_FIELD_CREATED_AT = "createdAt"
SORT_FIELD_UPDATED_AT = "updatedAt"
SORT_FIELD_DUE_DATE = "dueDate"
SORT_FIELD_PRIORITY = "priority"
SORT_FIELD_TITLE = "title"
SORT_FIELDS = [
    SORT_FIELD_CREATED_AT,
    SORT_FIELD_UPDATED_AT,
    SORT_FIELD_DUE_DATE,
    SORT_FIELD_PRIORITY,
    SORT_FIELD_TITLE,
]

SORT_ORDER_ASC = "asc"
SORT_ORDER_DESC = "desc"
SORT_ORDERS = [SORT_ORDER_ASC, SORT_ORDER_DESC]

# Lower rank sorts first when ascending.
PRIORITY_RANK = {
    TaskPriority.LOW.value: 1,
    TaskPriority.MEDIUM.value: 2,
    TaskPriority.HIGH.value: 3,
    TaskPriority.CRITICAL.value: 4,
}

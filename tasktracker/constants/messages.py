# Application Messages
class AppMessages:
    TEAM_CREATED = "Team created successfully"
    TEAM_UPDATED = "Team updated successfully"
    TEAM_DELETED = "Team deleted successfully"
    TEAMS_FETCHED = "Teams fetched successfully"
    TEAM_FETCHED = "Team fetched successfully"
    INVITATION_SENT = "Invitation sent successfully"
    INVITATIONS_FETCHED = "Invitations fetched successfully"
    INVITATION_ACCEPTED = "Invitation accepted successfully"
    INVITATION_DECLINED = "Invitation declined"
    INVITATION_REVOKED = "Invitation revoked"
    MEMBER_REMOVED = "Member removed successfully"
    MEMBER_ROLE_UPDATED = "Member role updated successfully"
    OWNERSHIP_TRANSFERRED = "Ownership transferred successfully"
    TEAM_LEFT = "You have left the team"
    TASK_CREATED = "Task created successfully"
    TASK_UPDATED = "Task updated successfully"
    TASK_DELETED = "Task deleted successfully"
    TASK_ARCHIVED = "Task archived successfully"
    TASK_RESTORED = "Task restored successfully"
    TASKS_FETCHED = "Tasks fetched successfully"
    TASK_FETCHED = "Task fetched successfully"
    ANALYTICS_FETCHED = "Analytics fetched successfully"


# Repository error messages
class RepositoryErrors:
    TASK_CREATION_FAILED = "Failed to create task: {0}"
    TEAM_CREATION_FAILED = "Failed to create team: {0}"
    DB_INIT_FAILED = "Failed to initialize database: {0}"
    VERSION_CONFLICT = "{0} {1} was modified concurrently"


# API error messages
class ApiErrors:
    INTERNAL_SERVER_ERROR = "Internal server error"
    UNEXPECTED_ERROR_OCCURRED = "An unexpected error occurred"
    VALIDATION_ERROR = "Validation Error"
    AUTHENTICATION_FAILED = "Authentication Failed"
    FORBIDDEN_TITLE = "Forbidden"
    RESOURCE_NOT_FOUND_TITLE = "Resource Not Found"
    CONFLICT_TITLE = "Conflict"
    INVALID_STATE_TITLE = "Invalid State"
    TEAM_NOT_FOUND = "Team with ID {0} not found."
    TEAM_NOT_FOUND_GENERIC = "Team not found."
    TASK_NOT_FOUND = "Task with ID {0} not found."
    TASK_NOT_FOUND_GENERIC = "Task not found."
    MEMBER_NOT_FOUND = "User {0} is not a member of this team."
    INVITATION_NOT_FOUND = "Invitation {0} not found."
    USER_NOT_FOUND = "User not found."
    ALREADY_MEMBER = "{0} is already a member of this team."
    ALREADY_INVITED = "{0} already has a pending invitation to this team."
    DUPLICATE_TEAM_NAME = "You already belong to a team named '{0}'."
    INVITATION_NOT_PENDING = "Invitation is {0} and can no longer be answered."
    INVITATION_EXPIRED = "Invitation has expired."
    CONCURRENT_MODIFICATION = "The resource was modified by another request. Please retry."
    FORBIDDEN = "You are not allowed to {0}."


# Validation error messages
class ValidationErrors:
    BLANK_TITLE = "Title must not be blank."
    TITLE_TOO_LONG = "Title cannot exceed {0} characters."
    DESCRIPTION_TOO_LONG = "Description cannot exceed {0} characters."
    BLANK_TEAM_NAME = "Team name must not be blank."
    TEAM_NAME_TOO_LONG = "Team name cannot exceed {0} characters."
    TEAM_DESCRIPTION_TOO_LONG = "Team description cannot exceed {0} characters."
    TAG_TOO_LONG = "Tag '{0}' cannot exceed {1} characters."
    PAST_DUE_DATE = "Due date cannot be in the past."
    DUE_DATE_REQUIRED = "Due date is required for team tasks."
    INVALID_OBJECT_ID = "{0} is not a valid ObjectId."
    INVALID_ROLE = "Role must be one of: {0}."
    ASSIGNEE_NOT_MEMBER = "Assignee {0} is not a member of this team."
    PERSONAL_TASK_ASSIGNEE = "Personal tasks cannot be assigned."
    EMPTY_UPDATE = "At least one field must be provided."
    PAGE_POSITIVE = "Page must be a positive integer"
    LIMIT_POSITIVE = "Limit must be a positive integer"
    MAX_LIMIT_EXCEEDED = "Maximum limit of {0} exceeded"
    DUE_WINDOW_INVALID = "dueAfter must be earlier than dueBefore."


class AuthErrorMessages:
    AUTHENTICATION_REQUIRED = "Authentication credentials were not provided."
    TOKEN_EXPIRED = "Access token has expired."
    TOKEN_EXPIRED_TITLE = "Token Expired"
    TOKEN_INVALID = "Invalid access token."
    INVALID_TOKEN_TITLE = "Invalid Token"
    NO_ACCESS_TOKEN = "No access token provided."
    USER_NOT_FOUND = "Token is valid but user not found."

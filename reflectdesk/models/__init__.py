from .api_validation import (
    ApiModel,
    RegisterRequest,
    LoginRequest,
    DocumentCreate,
    DocumentUpdate,
    TaskGroupCreate,
    TaskGroupUpdate,
    TaskCreate,
    TaskUpdate,
    MoveRequest,
    SessionCreate,
    SessionUpdate,
    SessionReflection,
    ReviewCreate,
    ReviewUpdate,
)

__all__ = [
    "ApiModel",
    "RegisterRequest",
    "LoginRequest",
    "DocumentCreate",
    "DocumentUpdate",
    "TaskGroupCreate",
    "TaskGroupUpdate",
    "TaskCreate",
    "TaskUpdate",
    "MoveRequest",
    "SessionCreate",
    "SessionUpdate",
    "SessionReflection",
    "ReviewCreate",
    "ReviewUpdate",
]

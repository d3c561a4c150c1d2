"""
API schemas package. Import from submodules or from this package.

Example:
    from lms_api.schemas import Course, Progress
    from lms_api.schemas.course_schemas import Course
"""

from lms_api.schemas.auth_schemas import (
    AuthTokenPayload,
    ExternalIdentity,
    LoginRequest,
    LoginResponse,
    LoginUser,
    LogoutResponse,
)
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.schemas.course_schemas import (
    Course,
    CourseModule,
    CreateCourseRequest,
    CreateLessonRequest,
    CreateModuleRequest,
    Lesson,
    ReorderLessonsRequest,
    ReorderModulesRequest,
    UpdateCourseRequest,
    UpdateLessonRequest,
    UpdateModuleRequest,
)
from lms_api.schemas.progress_schemas import (
    MarkCompletedRequest,
    Progress,
    ProgressStatus,
    RecordAttemptRequest,
)
from lms_api.schemas.quiz_schemas import CreateQuizQuestion, CreateQuizRequest, Quiz, QuizQuestion
from lms_api.schemas.upload_schemas import CorsRequest, CorsResponse, UploadResponse
from lms_api.schemas.user_schemas import (
    CreateUserRequest,
    Role,
    UpdateCategoryRequest,
    UpdateXpRequest,
    User,
)

__all__ = [
    # auth
    "AuthTokenPayload",
    "ExternalIdentity",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "LogoutResponse",
    # certificates
    "Certificate",
    # courses
    "Course",
    "CourseModule",
    "CreateCourseRequest",
    "CreateLessonRequest",
    "CreateModuleRequest",
    "Lesson",
    "ReorderLessonsRequest",
    "ReorderModulesRequest",
    "UpdateCourseRequest",
    "UpdateLessonRequest",
    "UpdateModuleRequest",
    # progress
    "MarkCompletedRequest",
    "Progress",
    "ProgressStatus",
    "RecordAttemptRequest",
    # quizzes
    "CreateQuizQuestion",
    "CreateQuizRequest",
    "Quiz",
    "QuizQuestion",
    # uploads
    "CorsRequest",
    "CorsResponse",
    "UploadResponse",
    # users
    "CreateUserRequest",
    "Role",
    "UpdateCategoryRequest",
    "UpdateXpRequest",
    "User",
]

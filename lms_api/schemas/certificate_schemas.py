from datetime import datetime

from lms_api.schemas.base import CamelModel


class Certificate(CamelModel):
    id: str
    user_id: str
    course_id: str
    user_name: str
    course_title: str
    issued_at: datetime

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from lms_api.repositories.base import Store
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.utils.logger import configure_logging

logger = configure_logging()


class CertificateService:
    def __init__(self, store: Store):
        self.store = store

    def find_all(self, user_id: Optional[str] = None) -> list[Certificate]:
        return self.store.certificates.list_certificates(user_id)

    def issue_certificate(
        self, user_id: str, user_name: str, course_id: str, course_title: str
    ) -> tuple[Certificate, bool]:
        """
        Issue the (user, course) certificate with name/title snapshots.
        Returns (certificate, created); an existing certificate is returned untouched.
        """
        cert, created = self.store.certificates.issue(
            Certificate(
                id=f"cert_{uuid4().hex[:16]}",
                user_id=user_id,
                user_name=user_name,
                course_id=course_id,
                course_title=course_title,
                issued_at=datetime.now(timezone.utc),
            )
        )
        if created:
            logger.info("certificate issued user_id=%s course_id=%s", user_id, course_id)
        return cert, created

from typing import Optional

from fastapi import APIRouter, Depends, Query

from lms_api.dependencies import get_store
from lms_api.repositories.base import Store
from lms_api.schemas.certificate_schemas import Certificate
from lms_api.services.certificate_service import CertificateService

certificate_routes = APIRouter()


@certificate_routes.get("/certificates", response_model=list[Certificate])
async def list_certificates(
    user_id: Optional[str] = Query(None, alias="userId"),
    store: Store = Depends(get_store),
) -> list[Certificate]:
    return CertificateService(store).find_all(user_id)


@certificate_routes.get("/certificates/{user_id}", response_model=list[Certificate])
async def user_certificates(user_id: str, store: Store = Depends(get_store)) -> list[Certificate]:
    return CertificateService(store).find_all(user_id)

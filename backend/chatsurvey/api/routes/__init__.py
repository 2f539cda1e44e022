from fastapi import APIRouter

from chatsurvey.api.routes import admin, health
from chatsurvey.api.routes.surveys import build_survey_router
from chatsurvey.surveys import SURVEYS

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
for _survey in SURVEYS.values():
    api_router.include_router(build_survey_router(_survey))
api_router.include_router(admin.router)

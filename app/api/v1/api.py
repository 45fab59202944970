from fastapi import APIRouter

from app.api.v1.endpoints import assignments, templates, team

api_router = APIRouter()

# Fixed sub-paths go before the /assignments/{assignment_id} routes
api_router.include_router(templates.router)
api_router.include_router(team.router)
api_router.include_router(assignments.router)

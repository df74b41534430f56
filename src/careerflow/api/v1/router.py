from fastapi import APIRouter

from careerflow.api.v1 import candidates, geo, health, jobs, matching

api_v1_router = APIRouter()
api_v1_router.include_router(health.router)
api_v1_router.include_router(candidates.router)
api_v1_router.include_router(jobs.router)
api_v1_router.include_router(geo.router)
api_v1_router.include_router(matching.router)

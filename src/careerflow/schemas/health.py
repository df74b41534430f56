from careerflow.schemas import APIModel


class HealthResponse(APIModel):
    status: str
    database: str
    version: str
    external_sources: list[str] = []


class StatusResponse(APIModel):
    status: str

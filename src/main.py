from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import get_settings
from src.routes.silhouettes import router as silhouettes_router
from src.routes.verifications import router as verifications_router

app = FastAPI(title="Toolscan Detection")

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
    max_age=600,
)

app.include_router(silhouettes_router)
app.include_router(verifications_router)


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}

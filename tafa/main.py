import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tafa import __version__
from tafa.config import APP_NAME, CORS_ORIGINS
from tafa.database import init_db
from tafa.routes.ai_routes import router as ai_router
from tafa.routes.analytics_routes import router as analytics_router
from tafa.routes.gamification_routes import router as gamification_router
from tafa.routes.goal_routes import router as goal_router
from tafa.routes.habit_routes import router as habit_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_db()
    except Exception as e:
        logger.error(f"Database init skipped or failed: {e}")
    yield


app = FastAPI(title=f"{APP_NAME} Personal Analytics", version=__version__, lifespan=lifespan)


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.detail})


@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(habit_router)
app.include_router(goal_router)
app.include_router(gamification_router)
app.include_router(analytics_router)
app.include_router(ai_router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("tafa.main:app", host="0.0.0.0", port=8000, reload=True)

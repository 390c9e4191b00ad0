"""
Workspace Recommender - FastAPI Backend
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from recommender import __version__
from recommender.config import get_settings
from recommender.routes import recommendations, health
from recommender.middleware.workspace_middleware import WorkspaceMiddleware
from recommender.middleware.logging_middleware import LoggingMiddleware

settings = get_settings()

app = FastAPI(
    title="Workspace Recommender",
    description="Assignee, priority, response-time and similar-ticket recommendations",
    version=__version__
)

# Middleware runs bottom-up: Workspace, then Logging, then CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LoggingMiddleware)

app.add_middleware(WorkspaceMiddleware)

app.include_router(recommendations.router)
app.include_router(health.router)


@app.get("/")
async def root():
    return {"message": "Workspace Recommender API", "version": __version__}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.fastapi_host, port=settings.fastapi_port)

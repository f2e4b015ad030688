from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from app.routes.match.match_routers import match_router

app = FastAPI(title="Matrimony Matchmaking API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(match_router)


@app.get("/health")
def health():
    return {"status": "ok"}

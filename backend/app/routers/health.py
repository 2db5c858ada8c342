from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["health"])


@router.get("/", response_class=PlainTextResponse)
async def root():
    return "Hello! server is running correctly"


@router.get("/health")
async def health():
    return {"status": "ok"}

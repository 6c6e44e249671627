
from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health():
    return {"status": "ok"}


@router.get("/ready")
def ready():
    from moneywave.main import allocator, config_engine

    config_loaded = config_engine is not None and allocator is not None
    return {
        "status": "ready" if config_loaded else "not_ready",
        "config_loaded": config_loaded,
    }

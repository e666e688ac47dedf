from fastapi import APIRouter, Request

router = APIRouter(prefix="/health", tags=["health"])

@router.get("")
async def health(request: Request):
    ledger = request.app.state.reset_service.ledger
    return {"status": "ok", "outstanding_challenges": len(ledger)}

@router.get("/readiness")
async def readiness(request: Request):
    sweeper = getattr(request.app.state, "sweeper_task", None)
    return {"ready": True, "sweeper": "running" if sweeper and not sweeper.done() else "off"}

@router.get("/liveness")
async def liveness():
    return {"alive": True}

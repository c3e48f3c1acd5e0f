import logging
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from arena.engine import Engine
from runtime.runner import TurnRunner
from .schemas import EventsResponse, SpeedRequest, SpeedResponse, StartRequest

log = logging.getLogger("api")

app = FastAPI(title="Grid Arena API")
runner: TurnRunner | None = None

# Enable CORS for development (renderer runs on a different port)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:5174", "http://localhost:5175"],  # Vite dev server
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _require_runner() -> TurnRunner:
    if not runner:
        raise HTTPException(400, "Battle not started")
    return runner


@app.get("/")
async def root():
    """API root endpoint."""
    return {
        "message": "Grid Arena API - RED (minimax) vs BLUE (greedy)",
        "docs": "/docs",
        "version": "1.0"
    }


@app.on_event("shutdown")
async def shutdown():
    """Stop the simulation on app shutdown."""
    global runner
    if runner:
        await runner.stop()
        runner = None


@app.post("/battle/start")
async def start_battle(req: StartRequest):
    """Start a new battle with specified seed."""
    await shutdown()
    global runner
    eng = Engine(seed=req.seed)
    runner = TurnRunner(eng, speed_ms=req.speed_ms, start_delay_ms=req.start_delay_ms)
    await runner.start()
    log.info(f"Battle started with seed {req.seed}")
    return {"battle_id": eng.state.battle_id}


@app.get("/battle/local/state")
async def get_state():
    """Get current battle state snapshot."""
    r = _require_runner()
    s = await r.snapshot()
    data = s.to_dict()
    data["paused"] = r.paused
    return data


@app.get("/battle/local/events")
async def get_events(since: int = 0, limit: int = 500):
    """Get events since offset."""
    r = _require_runner()
    evts, next_offset = r.events.since(since, limit)
    return EventsResponse(
        next_offset=next_offset,
        events=[{"kind": e.kind, "turn": e.turn, "data": e.data} for e in evts]
    )


@app.get("/battle/local/report")
async def get_report():
    """Reward breakdown; final once status is game_over."""
    r = _require_runner()
    return r.engine.report()


@app.post("/battle/local/pause")
async def pause_battle():
    r = _require_runner()
    await r.pause()
    return {"paused": True}


@app.post("/battle/local/resume")
async def resume_battle():
    r = _require_runner()
    await r.resume()
    return {"paused": False}


@app.post("/battle/local/speed")
async def set_speed(req: SpeedRequest):
    """Set turn pacing, or cycle NORMAL -> FAST -> ULTRA -> SLOW when no value is given."""
    r = _require_runner()
    if req.speed_ms is None:
        r.cycle_speed()
    else:
        r.set_speed(req.speed_ms)
    return SpeedResponse(speed_ms=r.speed_ms, preset=r.speed_name)


@app.get("/battle/local/speed")
async def get_speed():
    r = _require_runner()
    return SpeedResponse(speed_ms=r.speed_ms, preset=r.speed_name)

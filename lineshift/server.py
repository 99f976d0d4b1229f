from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from lineshift.api.schemas import SimulationConfig, SimulationReport, default_stages
from lineshift.simulation.pipeline import ManufacturingSystem

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
)

app = FastAPI()

# Enable CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # tighten for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

last_results = None    # report of the most recent run, in memory only


@app.post("/simulate", response_model=SimulationReport)
def simulate(config: SimulationConfig):
    """
    Run one simulation to completion and return its report.
    Sync route: FastAPI runs it in its threadpool.
    """
    global last_results
    system = ManufacturingSystem(config)
    last_results = system.run()
    return last_results


@app.get("/results")
async def get_results():
    """
    Fetch the report of the last run.
    """
    if last_results is None:
        return {"status": "no results yet"}
    return last_results


@app.get("/defaults")
async def get_defaults():
    """
    The reference five-stage line used when a config omits ``stages``.
    """
    return [stage.model_dump() for stage in default_stages()]

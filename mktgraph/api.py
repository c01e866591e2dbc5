"""Read-only HTTP API over the analytics pipeline.

Every request reruns the pipeline over the app's snapshot, so
responses are always fresh, never incrementally patched.
"""

import json
import logging
import os
from dataclasses import asdict
from typing import Any

import pandas as pd
from fastapi import FastAPI, HTTPException, Query

from .alerts.feed import build_pulse_feed
from .data.ingest import MarketSnapshot
from .data.sample import sample_snapshot
from .graph.centrality import top_by_degree
from .graph.view import graph_stats
from .league.table import RANK_MODES, rank_league
from .pipeline import PipelineConfig, load_pipeline_config, run_pipeline

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MKTGRAPH_CONFIG"


def records(df: pd.DataFrame) -> list[dict[str, Any]]:
    """DataFrame rows as JSON-safe dicts (NaN -> None)."""
    if len(df) == 0:
        return []
    return json.loads(df.to_json(orient="records", date_format="iso"))


def create_app(
    snapshot: MarketSnapshot | None = None,
    config: PipelineConfig | None = None,
) -> FastAPI:
    """
    Build the API app.

    Parameters
    ----------
    snapshot : MarketSnapshot | None
        Datasets to serve. Defaults to the built-in sample.
    config : PipelineConfig | None
        Defaults to the YAML file named by ``MKTGRAPH_CONFIG`` when
        set, otherwise PipelineConfig().
    """
    if config is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        config = load_pipeline_config(path) if path else PipelineConfig()

    app = FastAPI(
        title="Market Intelligence Graph API",
        description="API for the unified relationship graph, debt rollups, league table and alerts.",
        version="0.1.0",
    )
    app.state.snapshot = snapshot if snapshot is not None else sample_snapshot()
    app.state.config = config

    def _run(as_of: str | None):
        return run_pipeline(app.state.snapshot, app.state.config, as_of=as_of)

    @app.get("/")
    async def root():
        return {"message": "Market Intelligence Graph API"}

    @app.get("/graph")
    async def graph(as_of: str | None = None):
        result = _run(as_of)
        return {
            "nodes": records(result.graph.nodes),
            "edges": records(result.graph.edges),
            "stats": graph_stats(result.graph),
        }

    @app.get("/centrality")
    async def centrality(top: int = Query(5, ge=1), as_of: str | None = None):
        result = _run(as_of)
        return {
            "degree": {str(k): float(v) for k, v in result.degree.items()},
            "top": records(top_by_degree(result.graph.nodes, result.degree, n=top)),
        }

    @app.get("/rollup")
    async def rollup(as_of: str | None = None):
        return records(_run(as_of).rollup)

    @app.get("/league")
    async def league(by: str = "value", top: int | None = Query(None, ge=1)):
        if by not in RANK_MODES:
            raise HTTPException(status_code=400, detail=f"by must be one of {list(RANK_MODES)}")
        result = _run(None)
        return records(rank_league(result.league, by=by, top_n=top))

    @app.get("/alerts")
    async def alerts(as_of: str | None = None):
        return [a.to_dict() for a in _run(as_of).alerts]

    @app.get("/pulse")
    async def pulse(as_of: str | None = None):
        snap = app.state.snapshot
        result = _run(as_of)
        feed = build_pulse_feed(result.full_graph.edges, snap.bonds, snap.ratings, snap.deals, as_of=as_of)
        return [
            {**asdict(item), "ts": item.ts.isoformat()}
            for item in feed
        ]

    logger.info("Created Market Intelligence Graph API")

    return app


app = create_app()

#!/usr/bin/env python3
from fastapi import FastAPI, HTTPException, Response
from dotenv import load_dotenv
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
from datetime import datetime
from typing import Dict, Any
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

# Cargar variables .env si existe localmente (en producción se usan env vars)
load_dotenv()
from main import opportunity_mcp_server

app = FastAPI(title="Opportunity Matching MCP", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _unwrap(response: Dict[str, Any]) -> Dict[str, Any]:
    # fallo del almacén -> 502; entrada inválida -> 400
    if response.get("success"):
        return response
    error_type = response.get("error_type")
    if error_type == "FetchFailed":
        raise HTTPException(status_code=502, detail=response.get("error"))
    if error_type in ("ValueError", "KeyError", "TypeError"):
        raise HTTPException(status_code=400, detail=response.get("error"))
    if "available_tools" in response:
        raise HTTPException(status_code=404, detail=response.get("error"))
    raise HTTPException(status_code=500, detail=response.get("error"))


@app.get("/health")
async def health():
    return {"status": "healthy", "timestamp": datetime.now().isoformat()}

@app.get("/metrics")
async def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

@app.get("/tools")
async def tools():
    return {"tools": opportunity_mcp_server.get_tools(), "count": len(opportunity_mcp_server.get_tools())}

@app.post("/mcp/call")
async def call(req: Dict[str, Any]):
    return await opportunity_mcp_server.handle_request(req)

@app.post("/mcp/opportunity.search")
async def search(data: Dict[str, Any]):
    return _unwrap(await opportunity_mcp_server.handle_request({"tool": "opportunity.search", "params": data}))

@app.post("/mcp/opportunity.recommend")
async def recommend(data: Dict[str, Any]):
    return _unwrap(await opportunity_mcp_server.handle_request({"tool": "opportunity.recommend", "params": data}))

@app.post("/mcp/opportunity.rank")
async def rank(data: Dict[str, Any]):
    return _unwrap(await opportunity_mcp_server.handle_request({"tool": "opportunity.rank", "params": data}))

@app.post("/mcp/opportunity.seed")
async def seed(data: Dict[str, Any]):
    return _unwrap(await opportunity_mcp_server.handle_request({"tool": "opportunity.seed", "params": data}))


if __name__ == "__main__":
    uvicorn.run(app, host="127.0.0.1", port=8011, log_level="info")

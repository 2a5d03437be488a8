from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from rrctl.config import Config
from rrctl.errors import ConfigSourceError
from rrctl.modules import confsource
from rrctl.modules.runtime import ClusterRuntime

router = APIRouter(prefix="/cluster")

def get_runtime() -> ClusterRuntime:
    return ClusterRuntime()

class StartRequest(BaseModel):
    base_dir: Optional[str] = None
    cluster_host: str = Config.DEFAULT_CLUSTER_HOST

class CheckRequest(BaseModel):
    cluster_host: str = Config.DEFAULT_CLUSTER_HOST

@router.get("/status")
def cluster_status(runtime: ClusterRuntime = Depends(get_runtime)):
    entries = runtime.status()
    return {
        "running": bool(entries),
        "nodes": [{"port": e.port, "pid": e.pid} for e in entries],
    }

@router.post("/start")
def start_cluster(req: StartRequest, runtime: ClusterRuntime = Depends(get_runtime)):
    base_path = confsource.resolve_base_dir(req.base_dir)
    conf_files = confsource.discover(base_path)
    if not conf_files:
        raise ConfigSourceError(f"No configuration files found in path: {base_path}")
    report = runtime.start(req.cluster_host, [str(f) for f in conf_files])
    return {
        "launched": [{"port": e.port, "pid": e.pid} for e in report.launched],
        "failed": [{"path": str(node.path), "error": reason} for node, reason in report.failed],
        "registry_saved": report.registry_saved,
    }

@router.post("/stop")
def stop_cluster(runtime: ClusterRuntime = Depends(get_runtime)):
    return {"terminated": runtime.stop()}

@router.post("/check")
def check_cluster(req: CheckRequest, runtime: ClusterRuntime = Depends(get_runtime)):
    report = runtime.check(req.cluster_host)
    return {"endpoint": report.endpoint, "returncode": report.returncode}

from typing import Optional

from fastapi import APIRouter

from rrctl.modules import confsource

router = APIRouter(prefix="/config")

@router.get("/files")
def list_files(base_dir: Optional[str] = None):
    files = confsource.list_conf_files(base_dir)
    return {"files": [str(f) for f in files], "count": len(files)}

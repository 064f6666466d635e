import datetime
from pathlib import Path

def get_export_dir(root: str = "./exports", day: datetime.date = None) -> Path:
    """
    Get (and create) the export directory for a dashboard snapshot.
    Structure: {root}/{YYYY-MM-DD}/
    """
    day = day or datetime.date.today()
    path = Path(root) / day.isoformat()
    path.mkdir(parents=True, exist_ok=True)
    return path

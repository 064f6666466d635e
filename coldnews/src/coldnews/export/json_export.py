import json
from pathlib import Path
from typing import Any

def export_json(data: Any, path: Path):
    """
    Export data to JSON file.
    """
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False, default=str)

import json
from pathlib import Path
from typing import Any, Dict, Union

from es2tabular.pipeline.core import Source


class JsonFileSource(Source):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def read(self) -> Dict[str, Any]:
        with self.path.open("r", encoding="utf-8") as f:
            return json.load(f)

# schemas/booth_analysis.py
from pydantic import BaseModel, StrictInt
from typing import List, Optional, Union


class CompareBoothsRequest(BaseModel):
    # ids arrive as numbers or numeric strings; the service validates each one.
    # StrictInt keeps JSON booleans from being coerced to 1/0.
    boothIds: Optional[List[Union[StrictInt, str]]] = None

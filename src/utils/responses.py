# src/utils/responses.py
import math
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse


def success_response(data: Any, **extra: Any) -> Dict[str, Any]:
    response = {"success": True, "data": data}
    response.update(extra)
    return response


def paginated_response(data: Any, page: int, limit: int, total: int) -> Dict[str, Any]:
    return {
        "success": True,
        "data": data,
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "totalPages": math.ceil(total / limit) if limit else 0,
        },
    }


def error_response(status_code: int, message: str, detail: Optional[str] = None) -> JSONResponse:
    content: Dict[str, Any] = {"success": False, "error": message}
    if detail:
        content["detail"] = detail
    return JSONResponse(status_code=status_code, content=content)

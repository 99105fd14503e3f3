"""REST API of the menu analysis pipeline.

Endpoints:
- POST  /api/analyze-menu           menu photo (multipart `image` or JSON `imageBase64`)
- GET   /api/recent-analyses        latest stored analyses
- GET   /api/foods                  search the food catalogue
- GET   /api/foods/{name_korean}    one food by Korean name
- PATCH /api/foods/{food_id}        edit a food record
- GET   /api/proxy-image            fetch a dish image on behalf of the browser

Callers are identified by the `X-User-Id` header; anonymous callers get
a `session_id` cookie on their first analysis.
"""

import base64
import logging
import uuid
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from application.menu.commands.analyze_menu import AnalyzeMenuCommand, AnalyzeMenuResult
from application.menu.commands.update_korean_food import UpdateKoreanFoodCommand
from application.menu.queries.get_recent_analyses import GetRecentAnalysesQuery
from application.menu.queries.search_korean_foods import (
    GetKoreanFoodQuery,
    SearchKoreanFoodsQuery,
)
from domain.menu.core.exceptions import (
    FoodNotFoundError,
    ImageValidationError,
    InvalidFoodError,
    InvalidImageError,
    TooManyItemsError,
    UsageLimitExceededError,
)
from infrastructure.images.image_proxy import CACHE_CONTROL, DomainNotAllowedError
from metrics.menu_analysis import record_request

from .dependencies import ServiceContainer, get_container
from .schemas import (
    AnalyzeMenuJsonRequest,
    AnalyzeMenuResponse,
    DishResponse,
    KoreanFoodResponse,
    KoreanFoodUpdateRequest,
    MenuAnalysisResponse,
    TokenUsageResponse,
)

logger = logging.getLogger(__name__)

# Maximum upload size: 10MB
MAX_FILE_SIZE = 10 * 1024 * 1024

SESSION_COOKIE = "session_id"
SESSION_COOKIE_MAX_AGE = 60 * 60 * 24 * 365

NO_IMAGE_MESSAGE = "No image provided. Please upload an image file or provide base64 data."
ANALYSIS_FAILED_MESSAGE = "Failed to analyze menu. Please try again."

router = APIRouter(prefix="/api", tags=["menu"])


class _FileTooLarge(Exception):
    pass


def _success_message(result: AnalyzeMenuResult) -> str:
    if not result.is_korean_menu:
        return "This doesn't appear to be a Korean menu"
    return f"Found {len(result.dishes)} Korean dishes in the menu"


async def _read_image_payload(request: Request) -> Optional[str]:
    """Return the photo as base64, from a multipart upload or a JSON body.

    Raises:
        _FileTooLarge: If the upload exceeds MAX_FILE_SIZE
    """
    content_type = request.headers.get("content-type", "")

    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("image")
        if upload is None or isinstance(upload, str):
            return None
        content = await upload.read()
        if len(content) > MAX_FILE_SIZE:
            raise _FileTooLarge()
        if not content:
            return None
        return base64.b64encode(content).decode("ascii")

    try:
        body = await request.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    try:
        payload = AnalyzeMenuJsonRequest.model_validate(body)
    except ValidationError:
        return None
    return payload.image_base64


def _with_session(response: Response, session_id: Optional[str], issued: bool) -> Response:
    if issued and session_id:
        response.set_cookie(
            SESSION_COOKIE,
            session_id,
            max_age=SESSION_COOKIE_MAX_AGE,
            httponly=True,
            samesite="lax",
        )
    return response


@router.post("/analyze-menu", response_model=AnalyzeMenuResponse)
async def analyze_menu(
    request: Request,
    x_user_id: Optional[str] = Header(default=None),
    container: ServiceContainer = Depends(get_container),
) -> Response:
    """Analyze a menu photo.

    Status codes:
        200: analysis (fresh or cached)
        400: missing/invalid image, or too many menu items
        402: free usage limit reached
        413: upload larger than 10MB
        500: analysis failed
    """
    user_id = x_user_id or None
    session_id = request.cookies.get(SESSION_COOKIE)
    issued = False
    if not user_id and not session_id:
        session_id = uuid.uuid4().hex
        issued = True

    def reply(status_code: int, content: Dict[str, Any]) -> Response:
        return _with_session(JSONResponse(status_code=status_code, content=content), session_id, issued)

    try:
        image_base64 = await _read_image_payload(request)
    except _FileTooLarge:
        max_mb = MAX_FILE_SIZE // 1024 // 1024
        return reply(413, {"message": f"File too large. Maximum size: {max_mb}MB"})

    if not image_base64:
        return reply(400, {"message": NO_IMAGE_MESSAGE})

    command = AnalyzeMenuCommand(
        image_base64=image_base64,
        user_id=user_id,
        session_id=None if user_id else session_id,
    )

    try:
        result = await container.analyze_menu.handle(command)
    except UsageLimitExceededError as e:
        record_request("usage_limit")
        content: Dict[str, Any] = {
            "message": f"USAGE_LIMIT_ERROR: {e}",
            "usageCount": e.usage_count,
            "isLimitReached": True,
        }
        if e.requires_auth:
            content["requiresAuth"] = True
        if e.requires_payment:
            content["requiresPayment"] = True
        return reply(402, content)
    except TooManyItemsError as e:
        record_request("too_many_items")
        return reply(
            400,
            {"message": str(e), "isLimitError": True, "detectedCount": e.detected_count},
        )
    except InvalidImageError:
        return reply(400, {"message": "Invalid image data"})
    except Exception as e:
        record_request("failed")
        logger.error("Menu analysis failed", extra={"error": str(e)}, exc_info=True)
        return reply(500, {"message": ANALYSIS_FAILED_MESSAGE})

    body = AnalyzeMenuResponse(
        id=result.analysis_id,
        is_korean_menu=result.is_korean_menu,
        dishes=[DishResponse.from_domain(d) for d in result.dishes],
        extracted_food_names=result.extracted_food_names,
        message=_success_message(result),
        token_usage=TokenUsageResponse.from_domain(result.token_usage),
        cached=result.cached,
        cache_date=result.cache_date,
    )
    return reply(200, body.model_dump(mode="json", by_alias=True))


@router.get("/recent-analyses", response_model=List[MenuAnalysisResponse])
async def recent_analyses(
    limit: int = Query(default=10, ge=1, le=50),
    container: ServiceContainer = Depends(get_container),
) -> List[MenuAnalysisResponse]:
    analyses = await container.recent_analyses.handle(GetRecentAnalysesQuery(limit=limit))
    return [MenuAnalysisResponse.from_domain(a) for a in analyses]


@router.get("/foods", response_model=List[KoreanFoodResponse])
async def search_foods(
    query: str = Query(default=""),
    container: ServiceContainer = Depends(get_container),
) -> List[KoreanFoodResponse]:
    foods = await container.search_foods.handle(SearchKoreanFoodsQuery(query=query))
    return [KoreanFoodResponse.from_domain(f) for f in foods]


@router.get("/foods/{name_korean}", response_model=KoreanFoodResponse)
async def get_food(
    name_korean: str,
    container: ServiceContainer = Depends(get_container),
) -> KoreanFoodResponse:
    food = await container.get_food.handle(GetKoreanFoodQuery(name_korean=name_korean))
    if food is None:
        raise HTTPException(status_code=404, detail=f"Food '{name_korean}' not found")
    return KoreanFoodResponse.from_domain(food)


@router.patch("/foods/{food_id}", response_model=KoreanFoodResponse)
async def update_food(
    food_id: str,
    changes: KoreanFoodUpdateRequest,
    container: ServiceContainer = Depends(get_container),
) -> KoreanFoodResponse:
    command = UpdateKoreanFoodCommand(
        food_id=food_id,
        changes=changes.to_changes(),
    )
    try:
        food = await container.update_food.handle(command)
    except FoodNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except InvalidFoodError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return KoreanFoodResponse.from_domain(food)


@router.get("/proxy-image", response_model=None)
async def proxy_image(
    url: Optional[str] = Query(default=None),
    container: ServiceContainer = Depends(get_container),
) -> Union[Response, JSONResponse]:
    """Stream a dish image through the backend.

    Image CDNs often refuse hotlinking from the browser; the proxy retries
    with several header profiles before giving up.
    """
    if not url:
        return JSONResponse(status_code=400, content={"message": "Image URL is required"})

    try:
        image = await container.image_proxy.fetch(url)
    except DomainNotAllowedError as e:
        logger.warning("Proxy domain rejected", extra={"hostname": e.hostname})
        return JSONResponse(status_code=403, content={"message": "Domain not allowed"})
    except ImageValidationError as e:
        return JSONResponse(
            status_code=404,
            content={
                "message": "Image not accessible",
                "hostname": urlparse(url).hostname,
                "error": e.reason or str(e),
            },
        )

    return Response(
        content=image.content,
        media_type=image.content_type,
        headers={
            "Cache-Control": CACHE_CONTROL,
            "X-Image-Source": image.source_host,
            "Access-Control-Allow-Origin": "*",
        },
    )

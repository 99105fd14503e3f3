"""Composition root of the REST API.

`build_container()` wires ports to services once at startup; routes
receive the container through the `get_container` dependency, which
tests replace with `app.dependency_overrides`.
"""

from dataclasses import dataclass

from fastapi import HTTPException, Request

from application.menu.commands.analyze_menu import AnalyzeMenuCommandHandler
from application.menu.commands.update_korean_food import UpdateKoreanFoodCommandHandler
from application.menu.event_handlers.menu_analyzed_handler import MenuAnalyzedHandler
from application.menu.orchestrators.menu_orchestrator import MenuAnalysisOrchestrator
from application.menu.queries.get_recent_analyses import GetRecentAnalysesQueryHandler
from application.menu.queries.search_korean_foods import (
    GetKoreanFoodQueryHandler,
    SearchKoreanFoodsQueryHandler,
)
from application.menu.services.usage_gate import UsageGate
from domain.menu.core.events.menu_analyzed import MenuAnalyzed
from domain.menu.images.services.image_waterfall import ImageResolutionWaterfall
from domain.menu.ocr.ports.menu_text_extractor import IMenuTextExtractor
from domain.menu.resolution.ports.dish_detail_generator import IDishDetailGenerator
from domain.menu.resolution.services.dish_resolver import DishResolver
from domain.shared.ports.event_bus import IEventBus
from infrastructure.config import AppConfig
from infrastructure.images.image_proxy import ImageProxy
from infrastructure.persistence.factory import Repositories


@dataclass(frozen=True)
class ServiceContainer:
    analyze_menu: AnalyzeMenuCommandHandler
    update_food: UpdateKoreanFoodCommandHandler
    recent_analyses: GetRecentAnalysesQueryHandler
    search_foods: SearchKoreanFoodsQueryHandler
    get_food: GetKoreanFoodQueryHandler
    image_proxy: ImageProxy


def build_container(
    *,
    config: AppConfig,
    text_extractor: IMenuTextExtractor,
    detail_generator: IDishDetailGenerator,
    waterfall: ImageResolutionWaterfall,
    repositories: Repositories,
    event_bus: IEventBus,
    image_proxy: ImageProxy,
) -> ServiceContainer:
    """Wire the menu pipeline and subscribe its event handlers."""
    resolver = DishResolver(
        food_repository=repositories.foods,
        detail_generator=detail_generator,
        image_waterfall=waterfall,
    )
    orchestrator = MenuAnalysisOrchestrator(
        text_extractor=text_extractor,
        dish_resolver=resolver,
        cost_model=config.cost_model,
        max_items=config.max_menu_items,
    )
    usage_gate = UsageGate(
        repositories.usage,
        free_limit=config.free_usage_limit,
        admin_user_ids=config.admin_user_ids,
    )

    event_bus.subscribe(MenuAnalyzed, MenuAnalyzedHandler().handle)

    return ServiceContainer(
        analyze_menu=AnalyzeMenuCommandHandler(
            orchestrator=orchestrator,
            repository=repositories.analyses,
            usage_gate=usage_gate,
            event_bus=event_bus,
        ),
        update_food=UpdateKoreanFoodCommandHandler(repositories.foods),
        recent_analyses=GetRecentAnalysesQueryHandler(repositories.analyses),
        search_foods=SearchKoreanFoodsQueryHandler(repositories.foods),
        get_food=GetKoreanFoodQueryHandler(repositories.foods),
        image_proxy=image_proxy,
    )


def get_container(request: Request) -> ServiceContainer:
    container = getattr(request.app.state, "container", None)
    if container is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return container

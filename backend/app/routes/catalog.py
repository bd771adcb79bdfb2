import logging

from fastapi import APIRouter, Depends

from app.dependencies.services import get_catalog_service, get_data_source
from app.models.credit_card import CreditCardResponse
from app.services.catalog_service import CatalogService
from app.services.errors import NotFoundError, UpstreamUnavailable
from app.services.health_service import DataSourceContext
from engine.cards import static_catalog

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/cards",
    tags=["cards"]
)


@router.get("", response_model=list[CreditCardResponse])
def get_cards(
    service: CatalogService = Depends(get_catalog_service),
    source: DataSourceContext = Depends(get_data_source),
):
    if source.is_store_available():
        try:
            cards = service.get_all()
            if cards:
                return [card.to_dict() for card in cards]
        except UpstreamUnavailable as exc:
            logger.warning(f"Catalog listing failed, serving static catalog: {exc}")
    return [card.to_dict() for card in static_catalog.get_all()]


@router.get("/{card_id}", response_model=CreditCardResponse)
def get_card(
    card_id: int,
    service: CatalogService = Depends(get_catalog_service),
    source: DataSourceContext = Depends(get_data_source),
):
    card = None
    if source.is_store_available():
        try:
            card = service.get_by_id(card_id)
        except UpstreamUnavailable as exc:
            logger.warning(f"Card lookup failed, checking static catalog: {exc}")
    if card is None:
        card = static_catalog.get_by_id(card_id)
    if card is None:
        raise NotFoundError("Card not found", {"card_id": card_id})
    return card.to_dict()

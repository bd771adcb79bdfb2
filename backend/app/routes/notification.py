from fastapi import APIRouter, Depends

from app.dependencies.services import get_notification_service
from app.schemas.advisor_schemas import (
    NotificationResponse,
    WhatsAppRecommendationRequest,
    WhatsAppTemplateRequest,
)
from app.services.notification_service import NotificationService


router = APIRouter(
    prefix="/api/v1/notifications",
    tags=["notifications"]
)


@router.post("/whatsapp/send", response_model=NotificationResponse)
def send_whatsapp_template(
    payload: WhatsAppTemplateRequest,
    service: NotificationService = Depends(get_notification_service),
):
    return service.send_template(payload.phone_number, payload.template_sid, payload.variables)


@router.post("/whatsapp/recommendations", response_model=NotificationResponse)
def send_whatsapp_recommendations(
    payload: WhatsAppRecommendationRequest,
    service: NotificationService = Depends(get_notification_service),
):
    return service.send_recommendations(payload.phone_number, payload.card_ids, payload.cards)
